"""Workshop tickets recording device intake and outtake."""

from __future__ import annotations

import enum

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from ..database import Base


class TicketStatus(str, enum.Enum):
    """Lifecycle states for workshop tickets."""

    PENDING = "pending"
    REPAIRED = "repaired"
    UNREPAIRED = "unrepaired"

    @property
    def is_terminal(self) -> bool:
        return self is not TicketStatus.PENDING


TERMINAL_TICKET_STATUSES = (TicketStatus.REPAIRED, TicketStatus.UNREPAIRED)

TICKET_STATUS_ENUM = SAEnum(
    TicketStatus,
    name="ticket_status_enum",
    values_callable=lambda enum_cls: [member.value for member in enum_cls],
    native_enum=False,
    validate_strings=True,
)


class Ticket(Base):
    """A repair record opened when a device enters the workshop."""

    __tablename__ = "tickets"
    __table_args__ = (
        CheckConstraint(
            "date_out IS NULL OR date_out >= date_in",
            name="ck_tickets_date_out_after_date_in",
        ),
    )

    id = Column("ticket_id", Integer, primary_key=True, autoincrement=True)
    device_id = Column(
        Integer,
        ForeignKey("devices.device_id", ondelete="RESTRICT"),
        nullable=False,
    )
    status = Column(TICKET_STATUS_ENUM, nullable=False, default=TicketStatus.PENDING)
    date_in = Column(Date, nullable=False)
    date_out = Column(Date, nullable=True)
    details_in = Column(Text, nullable=True)
    details_out = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    device = relationship("Device", back_populates="tickets")


Index(
    "tickets_device_status_date_details_key",
    Ticket.device_id,
    Ticket.status,
    Ticket.date_in,
    func.coalesce(Ticket.details_in, ""),
    unique=True,
)
Index("tickets_status_date_out_idx", Ticket.status, Ticket.date_out)
