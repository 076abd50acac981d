from __future__ import annotations

from datetime import date

import pytest

from backend.app import models, schemas
from backend.app.services import ConflictError, DeviceService, NotFoundError, ValidationError


def _create(client, **payload):
    return client.post("/devices", json=payload)


def test_create_device_with_matching_brand_and_model(client, tic_location, pc_type, dell_catalog):
    response = _create(
        client,
        code="TIC-100",
        device_type_id=pc_type.id,
        location_id=tic_location.id,
        brand_id=dell_catalog["dell"].id,
        model_id=dell_catalog["optiplex"].id,
        serial="CN-0N8176",
    )

    assert response.status_code == 201, response.json()
    data = response.json()
    assert data["brand"] == "Dell"
    assert data["model"] == "OptiPlex 7010"
    assert data["device_type"] == "PC"
    assert data["location"]["path"] == "Edificio 01 > Piso 01 > Área TIC > Soporte Técnico"


def test_model_from_another_brand_is_rejected(client, db_session, tic_location, pc_type, dell_catalog):
    response = _create(
        client,
        device_type_id=pc_type.id,
        location_id=tic_location.id,
        brand_id=dell_catalog["dell"].id,
        model_id=dell_catalog["elitedesk"].id,
    )

    assert response.status_code == 409
    assert response.json()["detail"]["message"] == "El modelo no pertenece a la marca seleccionada."
    assert db_session.query(models.Device).count() == 0


def test_model_without_brand_is_rejected(db_session, tic_location, pc_type, dell_catalog):
    with pytest.raises(ValidationError):
        DeviceService.create_device(
            db_session,
            schemas.DeviceCreate(
                device_type_id=pc_type.id,
                location_id=tic_location.id,
                model_id=dell_catalog["optiplex"].id,
            ),
        )


def test_attributes_given_by_value_are_registered_once(client, db_session, tic_location):
    payload = {
        "device_type": "PC",
        "location_id": tic_location.id,
        "brand": "Lenovo",
        "model": "ThinkCentre M70",
        "os": "Windows 11",
        "ram": "16 GB",
        "storage": "512 GB SSD",
        "processor": "Intel Core i5",
        "architecture": "64 BIT",
    }

    first = _create(client, **payload)
    second = _create(client, **payload)

    assert first.status_code == 201, first.json()
    assert second.status_code == 201, second.json()
    assert first.json()["model_id"] == second.json()["model_id"]
    assert db_session.query(models.Brand).filter_by(value="Lenovo").count() == 1
    model = db_session.get(models.DeviceModel, first.json()["model_id"])
    assert model.brand.value == "Lenovo"


def test_device_type_and_location_are_required(client, tic_location, pc_type):
    missing_type = _create(client, location_id=tic_location.id)
    missing_location = _create(client, device_type_id=pc_type.id)

    assert missing_type.status_code == 400
    assert missing_location.status_code == 400
    assert missing_location.json()["detail"]["message"] == "La ubicación es obligatoria."


def test_create_device_resolves_location_path(client, db_session, pc_type):
    response = _create(
        client,
        device_type_id=pc_type.id,
        location={"building": "Edificio 03", "floor": "Piso 02", "area": "Laboratorio", "room": "Lab 1"},
    )

    assert response.status_code == 201, response.json()
    assert response.json()["location"]["path"] == "Edificio 03 > Piso 02 > Laboratorio > Lab 1"
    assert db_session.query(models.Building).filter_by(name="Edificio 03").count() == 1


def test_duplicate_code_is_conflict(client, device, pc_type, tic_location):
    response = _create(client, code="TIC-001", device_type_id=pc_type.id, location_id=tic_location.id)

    assert response.status_code == 409


def test_update_re_resolves_location_when_room_changes(db_session, device, tic_location):
    lab = models.Room(area_id=tic_location.area_id, name="Laboratorio de redes")
    db_session.add(lab)
    db_session.commit()

    updated = DeviceService.update_device(
        db_session, device.id, schemas.DeviceUpdate(room_id=lab.id)
    )

    assert updated.location.room_id == lab.id
    assert updated.location.area_id == tic_location.area_id
    assert updated.location_id != tic_location.id


def test_update_brand_alone_rechecks_model(db_session, device, dell_catalog):
    with pytest.raises(ConflictError):
        DeviceService.update_device(
            db_session, device.id, schemas.DeviceUpdate(brand_id=dell_catalog["hp"].id)
        )

    db_session.expire_all()
    assert db_session.get(models.Device, device.id).brand_id == dell_catalog["dell"].id


def test_update_changes_only_sent_fields(client, device):
    response = client.put(f"/devices/{device.id}", json={"details": "Monitor roto"})

    assert response.status_code == 200
    data = response.json()
    assert data["details"] == "Monitor roto"
    assert data["serial"] == "CN-0N8176"
    assert data["model"] == "OptiPlex 7010"


def test_delete_device_with_ticket_history_is_conflict(client, db_session, device):
    db_session.add(
        models.Ticket(
            device_id=device.id,
            status=models.TicketStatus.REPAIRED,
            date_in=date(2024, 3, 1),
            date_out=date(2024, 3, 2),
        )
    )
    db_session.commit()

    response = client.delete(f"/devices/{device.id}")

    assert response.status_code == 409
    assert response.json()["detail"]["detail"] == {"tickets": 1}


def test_get_unknown_device(db_session):
    with pytest.raises(NotFoundError):
        DeviceService.get_device(db_session, 4040)


def test_list_devices_search_filters_and_pagination(client, db_session, device, pc_type, tic_location):
    router_type = models.DeviceType(value="Router")
    db_session.add(router_type)
    db_session.commit()
    for index in range(3):
        _create(
            client,
            code=f"NET-{index}",
            device_type_id=router_type.id,
            location={"building": "Edificio 02", "floor": "Piso 01", "area": "Redes"},
        )

    page = client.get("/devices", params={"page": 1, "limit": 2}).json()
    assert page["total"] == 4
    assert page["page"] == 1
    assert page["limit"] == 2
    assert [item["code"] for item in page["items"]] == ["NET-2", "NET-1"]

    by_search = client.get("/devices", params={"search": "optiplex"}).json()
    assert [item["id"] for item in by_search["items"]] == [device.id]

    by_location_text = client.get("/devices", params={"search": "redes"}).json()
    assert by_location_text["total"] == 3

    combined = client.get(
        "/devices", params={"search": "edificio", "device_type_id": pc_type.id}
    ).json()
    assert [item["id"] for item in combined["items"]] == [device.id]

    by_building = client.get(
        "/devices", params={"building_id": device.location.area.floor.building_id}
    ).json()
    assert by_building["total"] == 1


def test_list_devices_validates_limit(client):
    response = client.get("/devices", params={"limit": 500})

    assert response.status_code == 422
