"""Academic semesters used to group workshop activity."""

from __future__ import annotations

import calendar
import logging
import re
from datetime import date, timedelta
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from .. import models, schemas
from .errors import NotFoundError, ValidationError, atomic

LOGGER = logging.getLogger(__name__)

FIRST_TERM = "I"
SECOND_TERM = "II"

_CODE_PATTERN = re.compile(r"^(I|II)-(\d{4})$")


def nth_weekday(year: int, month: int, weekday: int, n: int) -> date:
    """Return the ``n``-th ``weekday`` (Monday is 0) of the given month."""

    first = date(year, month, 1)
    offset = (weekday - first.weekday()) % 7
    return first + timedelta(days=offset + 7 * (n - 1))


def parse_period_code(code: str) -> Tuple[str, int]:
    match = _CODE_PATTERN.match(code or "")
    if match is None:
        raise ValidationError(f"Código de periodo inválido: {code}.")
    return match.group(1), int(match.group(2))


def default_bounds(term: str, year: int) -> Tuple[date, date]:
    """Default calendar of each semester.

    I-Y runs from the second Monday of March to the first Friday of July;
    II-Y from the first Monday of October to the second Friday of February
    of the following year.
    """

    if term == FIRST_TERM:
        return (
            nth_weekday(year, 3, calendar.MONDAY, 2),
            nth_weekday(year, 7, calendar.FRIDAY, 1),
        )
    return (
        nth_weekday(year, 10, calendar.MONDAY, 1),
        nth_weekday(year + 1, 2, calendar.FRIDAY, 2),
    )


class PeriodService:
    """Creation, lookup and adjustment of academic periods."""

    @staticmethod
    def ensure_periods(db: Session, today: Optional[date] = None) -> int:
        """Create the default periods of the previous, current and next year."""

        today = today or date.today()
        created = 0
        with atomic(db):
            for year in (today.year - 1, today.year, today.year + 1):
                for term in (FIRST_TERM, SECOND_TERM):
                    code = f"{term}-{year}"
                    if db.get(models.AcademicPeriod, code) is not None:
                        continue
                    starts_on, ends_on = default_bounds(term, year)
                    db.add(models.AcademicPeriod(code=code, starts_on=starts_on, ends_on=ends_on))
                    created += 1
        if created:
            LOGGER.info("Created %s academic period(s)", created)
        return created

    @staticmethod
    def list_periods(db: Session) -> list[models.AcademicPeriod]:
        return (
            db.query(models.AcademicPeriod)
            .order_by(models.AcademicPeriod.starts_on.desc())
            .all()
        )

    @staticmethod
    def get_period(db: Session, code: str) -> models.AcademicPeriod:
        period = db.get(models.AcademicPeriod, code)
        if period is None:
            raise NotFoundError(f"El periodo {code} no existe.")
        return period

    @staticmethod
    def active_period(
        db: Session, today: Optional[date] = None
    ) -> Optional[models.AcademicPeriod]:
        """Most recently started period; it stays active after its end date."""

        today = today or date.today()
        return (
            db.query(models.AcademicPeriod)
            .filter(models.AcademicPeriod.starts_on <= today)
            .order_by(models.AcademicPeriod.starts_on.desc())
            .first()
        )

    @staticmethod
    def update_period(
        db: Session,
        code: str,
        data: schemas.PeriodUpdate,
        today: Optional[date] = None,
    ) -> models.AcademicPeriod:
        term, year = parse_period_code(code)
        with atomic(db):
            period = PeriodService.get_period(db, code)
            active = PeriodService.active_period(db, today)
            if active is None or active.code != period.code:
                raise ValidationError("Solo se puede modificar el periodo activo.")
            if data.ends_on < data.starts_on:
                raise ValidationError("La fecha de fin no puede ser anterior a la de inicio.")

            if term == FIRST_TERM:
                expected = ((year, 3), (year, 7))
                message = f"El periodo {code} debe iniciar en marzo y terminar en julio de {year}."
            else:
                expected = ((year, 10), (year + 1, 2))
                message = (
                    f"El periodo {code} debe iniciar en octubre de {year} "
                    f"y terminar en febrero de {year + 1}."
                )
            actual = (
                (data.starts_on.year, data.starts_on.month),
                (data.ends_on.year, data.ends_on.month),
            )
            if actual != expected:
                raise ValidationError(message)

            period.starts_on = data.starts_on
            period.ends_on = data.ends_on
        db.refresh(period)
        LOGGER.info("Updated period %s to %s..%s", code, period.starts_on, period.ends_on)
        return period
