from __future__ import annotations

from datetime import date, timedelta

import pytest

from backend.app import models, schemas
from backend.app.services import ConflictError, TicketService, ValidationError


def _open(client, device_id, date_in="2024-04-10", details_in="No enciende"):
    return client.post(
        "/tickets",
        json={"device_id": device_id, "date_in": date_in, "details_in": details_in},
    )


def test_open_ticket_renders_device_and_location(client, device):
    response = _open(client, device.id)

    assert response.status_code == 201, response.json()
    data = response.json()
    assert data["status"] == "pending"
    assert data["date_out"] is None
    assert data["device_code"] == "TIC-001"
    assert data["brand"] == "Dell"
    assert data["model"] == "OptiPlex 7010"
    assert data["location"] == "Edificio 01 > Piso 01 > Área TIC > Soporte Técnico"


def test_open_ticket_by_device_code(client, device):
    by_code = client.post("/tickets", json={"code": " TIC-001 ", "date_in": "2024-04-10"})
    unknown = client.post("/tickets", json={"code": "NO-EXISTE", "date_in": "2024-04-10"})
    nothing = client.post("/tickets", json={"date_in": "2024-04-10"})

    assert by_code.status_code == 201
    assert by_code.json()["device_id"] == device.id
    assert unknown.status_code == 404
    assert nothing.status_code == 400


def test_future_intake_date_is_rejected(client, db_session, device):
    tomorrow = date.today() + timedelta(days=1)

    response = _open(client, device.id, date_in=tomorrow.isoformat())

    assert response.status_code == 400
    assert db_session.query(models.Ticket).count() == 0


def test_intake_date_is_checked_against_given_today(db_session, device):
    data = schemas.TicketOpen(device_id=device.id, date_in=date(2024, 5, 2))

    with pytest.raises(ValidationError):
        TicketService.open_ticket(db_session, data, today=date(2024, 5, 1))

    ticket = TicketService.open_ticket(db_session, data, today=date(2024, 5, 2))
    assert ticket.date_in == date(2024, 5, 2)


def test_identical_pending_ticket_is_conflict(client, device, caplog):
    first = _open(client, device.id)
    with caplog.at_level("WARNING"):
        duplicate = _open(client, device.id, details_in="  No enciende ")
    different = _open(client, device.id, details_in="Pantalla azul")

    assert first.status_code == 201
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"]["detail"] == {"ticket_id": first.json()["id"]}
    assert "duplicate ticket" in caplog.text
    assert different.status_code == 201


def test_close_ticket_validates_date_out(client, device):
    ticket_id = _open(client, device.id).json()["id"]

    before = client.post(
        f"/tickets/{ticket_id}/close",
        json={"status": "repaired", "date_out": "2024-04-09"},
    )
    missing = client.post(f"/tickets/{ticket_id}/close", json={"status": "repaired"})
    still_pending = client.post(
        f"/tickets/{ticket_id}/close",
        json={"status": "pending", "date_out": "2024-04-12"},
    )
    same_day = client.post(
        f"/tickets/{ticket_id}/close",
        json={"status": "repaired", "date_out": "2024-04-10", "details_out": "Fuente cambiada"},
    )

    assert before.status_code == 400
    assert missing.status_code == 400
    assert still_pending.status_code == 400
    assert same_day.status_code == 200, same_day.json()
    assert same_day.json()["status"] == "repaired"
    assert same_day.json()["details_out"] == "Fuente cambiada"


def test_closed_ticket_cannot_be_closed_or_edited_again(client, device):
    ticket_id = _open(client, device.id).json()["id"]
    closed = client.post(
        f"/tickets/{ticket_id}/close",
        json={"status": "unrepaired", "date_out": "2024-04-15"},
    )
    assert closed.status_code == 200

    again = client.post(
        f"/tickets/{ticket_id}/close",
        json={"status": "repaired", "date_out": "2024-04-16"},
    )
    edited = client.put(f"/tickets/{ticket_id}", json={"details_in": "Otro problema"})

    assert again.status_code == 400
    assert again.json()["detail"]["message"] == "El ticket ya está cerrado."
    assert edited.status_code == 400


def test_edit_pending_ticket(client, device):
    ticket_id = _open(client, device.id).json()["id"]

    response = client.put(
        f"/tickets/{ticket_id}",
        json={"date_in": "2024-04-08", "details_in": "No enciende; huele a quemado"},
    )

    assert response.status_code == 200
    assert response.json()["date_in"] == "2024-04-08"
    assert response.json()["details_in"] == "No enciende; huele a quemado"


def test_edit_cannot_duplicate_another_ticket(db_session, device):
    first = TicketService.open_ticket(
        db_session, schemas.TicketOpen(device_id=device.id, date_in=date(2024, 4, 10))
    )
    second = TicketService.open_ticket(
        db_session,
        schemas.TicketOpen(device_id=device.id, date_in=date(2024, 4, 11)),
    )

    with pytest.raises(ConflictError):
        TicketService.edit_ticket(
            db_session, second.id, schemas.TicketEdit(date_in=date(2024, 4, 10))
        )
    assert first.id != second.id


def test_single_pending_policy(client, device, monkeypatch):
    assert _open(client, device.id).status_code == 201
    assert _open(client, device.id, details_in="Teclado dañado").status_code == 201

    monkeypatch.setenv("TICKET_SINGLE_PENDING_PER_DEVICE", "1")
    blocked = _open(client, device.id, details_in="Sin red")

    assert blocked.status_code == 409


def test_list_filters_by_status_history_and_dates(client, device):
    pending_id = _open(client, device.id, date_in="2024-04-10").json()["id"]
    repaired_id = _open(client, device.id, date_in="2024-03-01", details_in="Lento").json()["id"]
    unrepaired_id = _open(client, device.id, date_in="2024-02-01", details_in="Placa").json()["id"]
    client.post(f"/tickets/{repaired_id}/close", json={"status": "repaired", "date_out": "2024-03-05"})
    client.post(
        f"/tickets/{unrepaired_id}/close", json={"status": "unrepaired", "date_out": "2024-02-20"}
    )

    everything = client.get("/tickets").json()
    assert [item["id"] for item in everything["items"]] == [pending_id, repaired_id, unrepaired_id]

    pending = client.get("/tickets", params={"status": "pending"}).json()
    assert [item["id"] for item in pending["items"]] == [pending_id]

    history = client.get("/tickets", params={"status": "history"}).json()
    assert [item["id"] for item in history["items"]] == [repaired_id, unrepaired_id]

    ranged = client.get(
        "/tickets", params={"date_out_from": "2024-03-01", "date_out_to": "2024-03-31"}
    ).json()
    assert [item["id"] for item in ranged["items"]] == [repaired_id]

    searched = client.get("/tickets", params={"search": "placa"}).json()
    assert [item["id"] for item in searched["items"]] == [unrepaired_id]


def test_list_filters_by_academic_period(client, db_session, device):
    db_session.add(
        models.AcademicPeriod(code="I-2024", starts_on=date(2024, 3, 11), ends_on=date(2024, 7, 5))
    )
    db_session.commit()
    inside = _open(client, device.id, date_in="2024-04-10").json()["id"]
    _open(client, device.id, date_in="2024-08-01")

    response = client.get("/tickets", params={"period": "I-2024"})
    unknown = client.get("/tickets", params={"period": "II-1999"})

    assert response.status_code == 200
    assert [item["id"] for item in response.json()["items"]] == [inside]
    assert unknown.status_code == 404


def test_delete_ticket(client, device):
    ticket_id = _open(client, device.id).json()["id"]

    assert client.delete(f"/tickets/{ticket_id}").status_code == 204
    assert client.get(f"/tickets/{ticket_id}").status_code == 404
