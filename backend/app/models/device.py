"""Model for devices tracked by the IT department."""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from ..database import Base


class Device(Base):
    """A PC, modem, switch or other asset pinned to one location."""

    __tablename__ = "devices"
    __table_args__ = (
        CheckConstraint(
            "model_id IS NULL OR brand_id IS NOT NULL",
            name="ck_devices_model_requires_brand",
        ),
    )

    id = Column("device_id", Integer, primary_key=True, autoincrement=True)
    code = Column(String(60), unique=True, nullable=True)
    device_type_id = Column(
        Integer,
        ForeignKey("device_types.device_type_id", ondelete="RESTRICT"),
        nullable=False,
    )
    location_id = Column(
        Integer,
        ForeignKey("locations.location_id", ondelete="RESTRICT"),
        nullable=False,
    )
    brand_id = Column(Integer, ForeignKey("brands.brand_id", ondelete="RESTRICT"), nullable=True)
    model_id = Column(
        Integer, ForeignKey("device_models.model_id", ondelete="RESTRICT"), nullable=True
    )
    os_id = Column(
        Integer, ForeignKey("operating_systems.os_id", ondelete="RESTRICT"), nullable=True
    )
    ram_id = Column(Integer, ForeignKey("ram_sizes.ram_id", ondelete="RESTRICT"), nullable=True)
    storage_id = Column(
        Integer, ForeignKey("storage_sizes.storage_id", ondelete="RESTRICT"), nullable=True
    )
    processor_id = Column(
        Integer, ForeignKey("processors.processor_id", ondelete="RESTRICT"), nullable=True
    )
    architecture = Column(String(20), nullable=True)
    serial = Column(String(120), nullable=True)
    details = Column(Text, nullable=True)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    device_type = relationship("DeviceType")
    location = relationship("Location", back_populates="devices")
    brand = relationship("Brand")
    model = relationship("DeviceModel")
    operating_system = relationship("OperatingSystem")
    ram = relationship("RamSize")
    storage = relationship("StorageSize")
    processor = relationship("Processor")
    tickets = relationship("Ticket", back_populates="device", passive_deletes=True)


Index("devices_location_idx", Device.location_id)
Index("devices_serial_idx", Device.serial)
