from __future__ import annotations

import pytest

from backend.app import models, schemas
from backend.app.services import (
    ConflictError,
    HierarchyKind,
    LocationHierarchyService,
    LocationResolver,
)


def _resolve(db_session, **path):
    return LocationResolver.find_or_create(db_session, **path).location


def test_cascading_selectors_return_direct_children(client, db_session, tic_location):
    _resolve(db_session, building="Edificio 01", floor="Piso 02", area="Contabilidad")
    _resolve(db_session, building="Edificio 02", floor="Piso 01", area="Biblioteca")

    buildings = client.get("/locations/buildings").json()
    assert [item["name"] for item in buildings] == ["Edificio 01", "Edificio 02"]

    building_id = buildings[0]["id"]
    floors = client.get(f"/locations/buildings/{building_id}/floors").json()
    assert [item["name"] for item in floors] == ["Piso 01", "Piso 02"]

    floor_id = floors[0]["id"]
    areas = client.get(f"/locations/floors/{floor_id}/areas").json()
    assert [item["name"] for item in areas] == ["Área TIC"]

    rooms = client.get(f"/locations/areas/{areas[0]['id']}/rooms").json()
    assert rooms == [{"id": tic_location.room_id, "area_id": areas[0]["id"], "name": "Soporte Técnico"}]


def test_selectors_report_unknown_parent(client):
    response = client.get("/locations/buildings/999/floors")

    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "not_found"


def test_name_selectors(client, db_session, tic_location):
    _resolve(db_session, building="Edificio 01", floor="Piso 01", area="Dirección")

    floors = client.get("/locations/floor-names", params={"building": "Edificio 01"})
    areas = client.get(
        "/locations/area-names", params={"building": "Edificio 01", "floor": "Piso 01"}
    )

    assert floors.json() == ["Piso 01"]
    assert areas.json() == ["Dirección", "Área TIC"]


def test_create_location_reports_existing_path(client):
    payload = {
        "building": "Edificio 01",
        "floor": "Piso 01",
        "area": "Área TIC",
        "room": "Soporte Técnico",
    }

    created = client.post("/locations", json=payload)
    repeated = client.post("/locations", json=payload)

    assert created.status_code == 201
    assert created.json()["status"] == "ok"
    assert repeated.status_code == 200
    assert repeated.json()["status"] == "exists"
    assert repeated.json()["location"]["id"] == created.json()["location"]["id"]
    assert created.json()["location"]["path"] == "Edificio 01 > Piso 01 > Área TIC > Soporte Técnico"


def test_create_location_requires_building_floor_and_area(client):
    response = client.post(
        "/locations", json={"building": "Edificio 01", "floor": " ", "area": "Área TIC"}
    )

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "validation_error"


def test_resolve_ids_rejects_room_of_another_area(client, db_session, tic_location):
    other = _resolve(db_session, building="Edificio 01", floor="Piso 02", area="Contabilidad")

    response = client.post(
        "/locations/resolve-ids",
        json={"area_id": other.area_id, "room_id": tic_location.room_id},
    )

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "hierarchy_mismatch"


def test_list_locations_filters_and_renders_paths(client, db_session, tic_location):
    _resolve(db_session, building="Edificio 02", floor="Piso 01", area="Biblioteca")

    everything = client.get("/locations").json()
    assert [item["path"] for item in everything] == [
        "Edificio 01 > Piso 01 > Área TIC > Soporte Técnico",
        "Edificio 02 > Piso 01 > Biblioteca",
    ]

    filtered = client.get("/locations", params={"search": "soporte"}).json()
    assert [item["id"] for item in filtered] == [tic_location.id]


def test_update_location_checks_room_membership(db_session, tic_location):
    other = _resolve(db_session, building="Edificio 01", floor="Piso 02", area="Contabilidad")

    with pytest.raises(ConflictError) as excinfo:
        LocationHierarchyService.update_location(
            db_session, other.id, schemas.LocationUpdate(room_id=tic_location.room_id)
        )
    assert excinfo.value.code == "hierarchy_mismatch"

    updated = LocationHierarchyService.update_location(
        db_session, tic_location.id, schemas.LocationUpdate(details="Escritorio 4")
    )
    assert updated.details == "Escritorio 4"
    assert updated.room_id == tic_location.room_id


def test_update_location_rejects_duplicate_placement(client, db_session, tic_location):
    detailed = _resolve(
        db_session,
        building="Edificio 01",
        floor="Piso 01",
        area="Área TIC",
        room="Soporte Técnico",
        details="Mesa 2",
    )

    response = client.put(f"/locations/{detailed.id}", json={"details": None})

    assert response.status_code == 409
    assert response.json()["detail"]["detail"] == {"location_id": tic_location.id}


def test_rename_enforces_uniqueness_within_parent(client, db_session, tic_location):
    second = _resolve(db_session, building="Edificio 01", floor="Piso 01", area="Dirección")

    clash = client.patch(f"/locations/areas/{second.area_id}", json={"name": "Área TIC"})
    assert clash.status_code == 409

    renamed = client.patch(f"/locations/areas/{second.area_id}", json={"name": "Rectoría"})
    assert renamed.status_code == 200
    assert renamed.json() == {"kind": "areas", "id": second.area_id, "name": "Rectoría"}


def test_delete_area_is_blocked_by_rooms_and_locations(client, db_session, tic_location):
    response = client.delete(f"/locations/areas/{tic_location.area_id}")

    assert response.status_code == 409
    assert response.json()["detail"]["detail"]["dependents"] == {
        "habitaciones": 1,
        "ubicaciones": 1,
    }
    assert db_session.get(models.Area, tic_location.area_id) is not None


def test_delete_empty_area_succeeds(db_session):
    building = models.Building(name="Edificio 09")
    db_session.add(building)
    db_session.flush()
    floor = models.Floor(building_id=building.id, name="Piso 01")
    db_session.add(floor)
    db_session.flush()
    area = models.Area(floor_id=floor.id, name="Bodega")
    db_session.add(area)
    db_session.commit()
    area_id = area.id

    LocationHierarchyService.delete(db_session, HierarchyKind.AREAS, area_id)

    assert db_session.get(models.Area, area_id) is None
    assert db_session.get(models.Floor, floor.id) is not None


def test_delete_location_is_blocked_by_devices(client, device, tic_location):
    location_id, room_id, device_id = tic_location.id, tic_location.room_id, device.id

    blocked = client.delete(f"/locations/locations/{location_id}")
    assert blocked.status_code == 409

    assert client.delete(f"/devices/{device_id}").status_code == 204
    room_blocked = client.delete(f"/locations/rooms/{room_id}")
    assert room_blocked.status_code == 409

    assert client.delete(f"/locations/locations/{location_id}").status_code == 204
    assert client.delete(f"/locations/rooms/{room_id}").status_code == 204


def test_delete_building_and_floor_are_blocked_by_children(client, db_session):
    area = _resolve(db_session, building="Edificio 05", floor="Piso 03", area="Archivo").area
    area_id, floor_id, building_id = area.id, area.floor_id, area.floor.building_id
    db_session.query(models.Location).filter(models.Location.area_id == area_id).delete()
    db_session.commit()

    building_blocked = client.delete(f"/locations/buildings/{building_id}")
    assert building_blocked.status_code == 409
    assert building_blocked.json()["detail"]["detail"]["dependents"] == {"pisos": 1}
    floor_blocked = client.delete(f"/locations/floors/{floor_id}")
    assert floor_blocked.status_code == 409
    assert floor_blocked.json()["detail"]["detail"]["dependents"] == {"áreas": 1}
    assert db_session.get(models.Building, building_id) is not None
    assert db_session.get(models.Floor, floor_id) is not None

    assert client.delete(f"/locations/areas/{area_id}").status_code == 204
    assert client.delete(f"/locations/floors/{floor_id}").status_code == 204
    assert client.delete(f"/locations/buildings/{building_id}").status_code == 204
    assert db_session.get(models.Building, building_id) is None


@pytest.mark.parametrize("kind", ["buildings", "floors", "areas", "rooms", "locations"])
def test_delete_unknown_entity_is_not_found(client, kind):
    response = client.delete(f"/locations/{kind}/999")

    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "not_found"
