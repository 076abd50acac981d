from __future__ import annotations

from alembic import command
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine, inspect, text

from backend.app.database import Base
from backend.app.migrations import build_alembic_config, run_database_migrations

INVENTORY_TABLES = {
    "buildings",
    "floors",
    "areas",
    "rooms",
    "locations",
    "device_types",
    "brands",
    "device_models",
    "devices",
    "tickets",
    "academic_periods",
}


def _head_revision() -> str:
    return ScriptDirectory.from_config(build_alembic_config()).get_current_head()


def _stored_revision(url: str) -> str:
    engine = create_engine(url)
    try:
        with engine.connect() as connection:
            return connection.scalar(text("SELECT version_num FROM alembic_version"))
    finally:
        engine.dispose()


def _tables(url: str) -> set[str]:
    engine = create_engine(url)
    try:
        return set(inspect(engine).get_table_names())
    finally:
        engine.dispose()


def test_run_database_migrations_builds_empty_database(tmp_path) -> None:
    url = f"sqlite:///{tmp_path / 'fresh.db'}"

    run_database_migrations(url)

    assert INVENTORY_TABLES <= _tables(url)
    assert _stored_revision(url) == _head_revision()


def test_run_database_migrations_upgrades_database_with_unknown_tables(tmp_path) -> None:
    url = f"sqlite:///{tmp_path / 'legacy.db'}"
    engine = create_engine(url)
    with engine.begin() as connection:
        connection.execute(text("CREATE TABLE legacy_table (id INTEGER PRIMARY KEY)"))
    engine.dispose()

    run_database_migrations(url)

    tables = _tables(url)
    assert "legacy_table" in tables
    assert INVENTORY_TABLES <= tables
    assert _stored_revision(url) == _head_revision()


def test_run_database_migrations_stamps_head_for_current_schema(tmp_path) -> None:
    url = f"sqlite:///{tmp_path / 'current.db'}"
    engine = create_engine(url)
    Base.metadata.create_all(bind=engine)
    engine.dispose()

    run_database_migrations(url)

    assert _stored_revision(url) == _head_revision()


def test_run_database_migrations_resumes_untracked_partial_schema(tmp_path) -> None:
    url = f"sqlite:///{tmp_path / 'partial.db'}"
    command.upgrade(build_alembic_config(url), "20241010_0001")
    engine = create_engine(url)
    with engine.begin() as connection:
        connection.execute(text("DROP TABLE alembic_version"))
    engine.dispose()
    assert "devices" not in _tables(url)

    run_database_migrations(url)

    assert INVENTORY_TABLES <= _tables(url)
    assert _stored_revision(url) == _head_revision()


def test_run_database_migrations_reads_database_url_from_env(tmp_path, monkeypatch) -> None:
    url = f"sqlite:///{tmp_path / 'from_env.db'}"
    monkeypatch.setenv("DATABASE_URL", url)

    run_database_migrations()

    assert "tickets" in _tables(url)
