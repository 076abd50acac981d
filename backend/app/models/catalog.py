"""Lookup tables holding normalized technical attributes of devices."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from ..database import Base


class DeviceType(Base):
    """Kind of equipment (PC, Modem, Switch...)."""

    __tablename__ = "device_types"

    id = Column("device_type_id", Integer, primary_key=True, autoincrement=True)
    value = Column(String(80), unique=True, nullable=False)


class Brand(Base):
    """Manufacturer of a device."""

    __tablename__ = "brands"

    id = Column("brand_id", Integer, primary_key=True, autoincrement=True)
    value = Column(String(80), unique=True, nullable=False)

    models = relationship("DeviceModel", back_populates="brand", order_by="DeviceModel.value")


class DeviceModel(Base):
    """Commercial model, always owned by a brand."""

    __tablename__ = "device_models"
    __table_args__ = (
        UniqueConstraint("brand_id", "value", name="device_models_brand_value_key"),
    )

    id = Column("model_id", Integer, primary_key=True, autoincrement=True)
    brand_id = Column(
        Integer,
        ForeignKey("brands.brand_id", ondelete="RESTRICT"),
        nullable=False,
    )
    value = Column(String(120), nullable=False)

    brand = relationship("Brand", back_populates="models")


class OperatingSystem(Base):
    __tablename__ = "operating_systems"

    id = Column("os_id", Integer, primary_key=True, autoincrement=True)
    value = Column(String(80), unique=True, nullable=False)


class RamSize(Base):
    __tablename__ = "ram_sizes"

    id = Column("ram_id", Integer, primary_key=True, autoincrement=True)
    value = Column(String(40), unique=True, nullable=False)


class StorageSize(Base):
    __tablename__ = "storage_sizes"

    id = Column("storage_id", Integer, primary_key=True, autoincrement=True)
    value = Column(String(40), unique=True, nullable=False)


class Processor(Base):
    __tablename__ = "processors"

    id = Column("processor_id", Integer, primary_key=True, autoincrement=True)
    value = Column(String(120), unique=True, nullable=False)
