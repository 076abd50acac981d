from __future__ import annotations

import base64
import os
import sys
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

# Ensure the project root (which exposes the ``backend`` package) is on ``sys.path``
PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["ENABLE_STARTUP_MIGRATIONS"] = "0"

from backend.app import models  # noqa: E402
from backend.app.database import (  # noqa: E402
    Base,
    configure_sqlite_engine,
    get_db,
    sqlite_connect_args,
)
from backend.app.main import app  # noqa: E402
from backend.app.security import generate_password_hash  # noqa: E402
from backend.app.services import LocationResolver  # noqa: E402


@pytest.fixture(scope="session")
def security_settings() -> dict:
    password = "Adm1nS3cret!"

    os.environ["ADMIN_USERNAME"] = "soporte@example.com"
    os.environ["ADMIN_JWT_SECRET"] = base64.urlsafe_b64encode(os.urandom(32)).decode()
    os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "60"
    os.environ["ADMIN_PASSWORD_HASH"] = generate_password_hash(password)

    return {
        "username": os.environ["ADMIN_USERNAME"],
        "password": password,
    }


@pytest.fixture(scope="session", autouse=True)
def _ensure_security_settings(security_settings: dict) -> Generator[None, None, None]:
    yield


engine = configure_sqlite_engine(
    create_engine("sqlite://", connect_args=sqlite_connect_args(), poolclass=StaticPool)
)


@pytest.fixture(scope="session", autouse=True)
def setup_database() -> Generator[None, None, None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Session whose commits and rollbacks stay inside one outer transaction."""

    connection = engine.connect()
    transaction = connection.begin()
    session = Session(
        bind=connection,
        autoflush=False,
        join_transaction_mode="create_savepoint",
    )
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture
def client(db_session: Session, security_settings: dict) -> Generator[TestClient, None, None]:
    def override_get_db() -> Generator[Session, None, None]:
        try:
            yield db_session
        finally:
            db_session.expire_all()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        response = test_client.post(
            "/auth/token",
            json={
                "username": security_settings["username"],
                "password": security_settings["password"],
            },
        )
        assert response.status_code == 200
        token = response.json()["access_token"]
        test_client.headers.update({"Authorization": f"Bearer {token}"})
        yield test_client
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def tic_location(db_session: Session) -> models.Location:
    """Soporte Técnico room inside the TIC area of Edificio 01, Piso 01."""

    return LocationResolver.find_or_create(
        db_session,
        building="Edificio 01",
        floor="Piso 01",
        area="Área TIC",
        room="Soporte Técnico",
    ).location


@pytest.fixture
def pc_type(db_session: Session) -> models.DeviceType:
    device_type = models.DeviceType(value="PC")
    db_session.add(device_type)
    db_session.commit()
    return device_type


@pytest.fixture
def dell_catalog(db_session: Session) -> dict:
    dell = models.Brand(value="Dell")
    hp = models.Brand(value="HP")
    db_session.add_all([dell, hp])
    db_session.flush()
    optiplex = models.DeviceModel(brand_id=dell.id, value="OptiPlex 7010")
    elitedesk = models.DeviceModel(brand_id=hp.id, value="EliteDesk 800")
    db_session.add_all([optiplex, elitedesk])
    db_session.commit()
    return {"dell": dell, "hp": hp, "optiplex": optiplex, "elitedesk": elitedesk}


@pytest.fixture
def device(db_session: Session, tic_location, pc_type, dell_catalog) -> models.Device:
    item = models.Device(
        code="TIC-001",
        device_type_id=pc_type.id,
        location_id=tic_location.id,
        brand_id=dell_catalog["dell"].id,
        model_id=dell_catalog["optiplex"].id,
        serial="CN-0N8176",
    )
    db_session.add(item)
    db_session.commit()
    return item
