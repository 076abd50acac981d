from __future__ import annotations

import calendar
from datetime import date

import pytest

from backend.app import models, schemas
from backend.app.services import PeriodService, ValidationError
from backend.app.services.periods import default_bounds, nth_weekday, parse_period_code


def test_nth_weekday():
    assert nth_weekday(2025, 3, calendar.MONDAY, 2) == date(2025, 3, 10)
    assert nth_weekday(2025, 7, calendar.FRIDAY, 1) == date(2025, 7, 4)
    assert nth_weekday(2026, 2, calendar.FRIDAY, 2) == date(2026, 2, 13)


def test_default_bounds_follow_the_academic_calendar():
    assert default_bounds("I", 2025) == (date(2025, 3, 10), date(2025, 7, 4))
    assert default_bounds("II", 2025) == (date(2025, 10, 6), date(2026, 2, 13))


def test_parse_period_code():
    assert parse_period_code("II-2025") == ("II", 2025)
    with pytest.raises(ValidationError):
        parse_period_code("III-2025")


def test_ensure_periods_is_idempotent(db_session):
    created = PeriodService.ensure_periods(db_session, today=date(2025, 5, 1))
    again = PeriodService.ensure_periods(db_session, today=date(2025, 5, 1))

    assert created == 6
    assert again == 0
    codes = [period.code for period in PeriodService.list_periods(db_session)]
    assert codes == ["II-2026", "I-2026", "II-2025", "I-2025", "II-2024", "I-2024"]


def test_active_period_stays_current_between_semesters(db_session):
    PeriodService.ensure_periods(db_session, today=date(2025, 5, 1))

    assert PeriodService.active_period(db_session, date(2025, 5, 1)).code == "I-2025"
    assert PeriodService.active_period(db_session, date(2025, 8, 15)).code == "I-2025"
    assert PeriodService.active_period(db_session, date(2025, 10, 6)).code == "II-2025"
    assert PeriodService.active_period(db_session, date(2020, 1, 1)) is None


def test_update_active_period(db_session):
    PeriodService.ensure_periods(db_session, today=date(2025, 5, 1))

    updated = PeriodService.update_period(
        db_session,
        "I-2025",
        schemas.PeriodUpdate(starts_on=date(2025, 3, 3), ends_on=date(2025, 7, 11)),
        today=date(2025, 5, 1),
    )

    assert updated.starts_on == date(2025, 3, 3)
    assert updated.ends_on == date(2025, 7, 11)


@pytest.mark.parametrize(
    ("code", "starts_on", "ends_on"),
    [
        ("II-2025", date(2025, 10, 6), date(2026, 2, 13)),
        ("I-2025", date(2025, 4, 1), date(2025, 7, 4)),
        ("I-2025", date(2025, 3, 20), date(2025, 3, 10)),
    ],
)
def test_update_period_rejections(db_session, code, starts_on, ends_on):
    PeriodService.ensure_periods(db_session, today=date(2025, 5, 1))

    with pytest.raises(ValidationError):
        PeriodService.update_period(
            db_session,
            code,
            schemas.PeriodUpdate(starts_on=starts_on, ends_on=ends_on),
            today=date(2025, 5, 1),
        )

    db_session.expire_all()
    assert db_session.get(models.AcademicPeriod, "I-2025").starts_on == date(2025, 3, 10)


def test_periods_endpoints(client, db_session):
    assert client.get("/periods/active").status_code == 404

    db_session.add(
        models.AcademicPeriod(code="I-2024", starts_on=date(2024, 3, 11), ends_on=date(2024, 7, 5))
    )
    db_session.commit()

    listed = client.get("/periods").json()
    active = client.get("/periods/active").json()

    assert listed == [
        {"code": "I-2024", "starts_on": "2024-03-11", "ends_on": "2024-07-05", "is_current": True}
    ]
    assert active["code"] == "I-2024"
