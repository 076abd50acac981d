"""SQLAlchemy models for the building > floor > area > room hierarchy."""

from __future__ import annotations

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from ..database import Base


class Building(Base):
    """Top level of the physical hierarchy."""

    __tablename__ = "buildings"

    id = Column("building_id", Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), unique=True, nullable=False)

    floors = relationship(
        "Floor",
        back_populates="building",
        passive_deletes=True,
        order_by="Floor.name",
    )


class Floor(Base):
    """A floor, named uniquely within its building."""

    __tablename__ = "floors"
    __table_args__ = (
        UniqueConstraint("building_id", "name", name="floors_building_name_key"),
    )

    id = Column("floor_id", Integer, primary_key=True, autoincrement=True)
    building_id = Column(
        Integer,
        ForeignKey("buildings.building_id", ondelete="CASCADE"),
        nullable=False,
    )
    name = Column(String(120), nullable=False)

    building = relationship("Building", back_populates="floors")
    areas = relationship(
        "Area",
        back_populates="floor",
        passive_deletes=True,
        order_by="Area.name",
    )


class Area(Base):
    """A department or open space on a floor."""

    __tablename__ = "areas"
    __table_args__ = (
        UniqueConstraint("floor_id", "name", name="areas_floor_name_key"),
    )

    id = Column("area_id", Integer, primary_key=True, autoincrement=True)
    floor_id = Column(
        Integer,
        ForeignKey("floors.floor_id", ondelete="CASCADE"),
        nullable=False,
    )
    name = Column(String(120), nullable=False)

    floor = relationship("Floor", back_populates="areas")
    rooms = relationship(
        "Room",
        back_populates="area",
        passive_deletes=True,
        order_by="Room.name",
    )
    locations = relationship("Location", back_populates="area", passive_deletes=True)


class Room(Base):
    """An enclosed room (office, lab, network closet) inside an area."""

    __tablename__ = "rooms"
    __table_args__ = (
        UniqueConstraint("area_id", "name", name="rooms_area_name_key"),
    )

    id = Column("room_id", Integer, primary_key=True, autoincrement=True)
    area_id = Column(
        Integer,
        ForeignKey("areas.area_id", ondelete="CASCADE"),
        nullable=False,
    )
    name = Column(String(120), nullable=False)

    area = relationship("Area", back_populates="rooms")
    locations = relationship("Location", back_populates="room", passive_deletes=True)


class Location(Base):
    """Addressable placement a device is assigned to.

    A location is an area, an optional room of that area, and optional free
    text. NULL room and details are folded into the unique index so that two
    open-area placements with no details collide as expected.
    """

    __tablename__ = "locations"

    id = Column("location_id", Integer, primary_key=True, autoincrement=True)
    area_id = Column(
        Integer,
        ForeignKey("areas.area_id", ondelete="RESTRICT"),
        nullable=False,
    )
    room_id = Column(
        Integer,
        ForeignKey("rooms.room_id", ondelete="RESTRICT"),
        nullable=True,
    )
    details = Column(Text, nullable=True)

    area = relationship("Area", back_populates="locations")
    room = relationship("Room", back_populates="locations")
    devices = relationship("Device", back_populates="location", passive_deletes=True)


Index(
    "locations_area_room_details_key",
    Location.area_id,
    func.coalesce(Location.room_id, 0),
    func.coalesce(Location.details, ""),
    unique=True,
)
