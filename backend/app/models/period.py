"""SQLAlchemy model for academic periods."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, Date, Index, String

from ..database import Base


class AcademicPeriod(Base):
    """Semester used to group workshop activity ("I-2025", "II-2025")."""

    __tablename__ = "academic_periods"
    __table_args__ = (
        CheckConstraint("ends_on >= starts_on", name="ck_academic_periods_valid_range"),
    )

    code = Column(String(16), primary_key=True)
    starts_on = Column(Date, nullable=False)
    ends_on = Column(Date, nullable=False)


Index("academic_periods_starts_on_idx", AcademicPeriod.starts_on)
