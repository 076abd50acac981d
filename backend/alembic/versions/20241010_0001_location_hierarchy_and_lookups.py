"""Location hierarchy and device attribute lookup tables."""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op


revision = "20241010_0001"
down_revision = None
branch_labels = None
depends_on = None


def _lookup_table(name: str, id_column: str, length: int) -> None:
    op.create_table(
        name,
        sa.Column(id_column, sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("value", sa.String(length), nullable=False),
        sa.UniqueConstraint("value", name=f"{name}_value_key"),
    )


def upgrade() -> None:
    op.create_table(
        "buildings",
        sa.Column("building_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.UniqueConstraint("name", name="buildings_name_key"),
    )
    op.create_table(
        "floors",
        sa.Column("floor_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "building_id",
            sa.Integer(),
            sa.ForeignKey("buildings.building_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(120), nullable=False),
        sa.UniqueConstraint("building_id", "name", name="floors_building_name_key"),
    )
    op.create_table(
        "areas",
        sa.Column("area_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "floor_id",
            sa.Integer(),
            sa.ForeignKey("floors.floor_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(120), nullable=False),
        sa.UniqueConstraint("floor_id", "name", name="areas_floor_name_key"),
    )
    op.create_table(
        "rooms",
        sa.Column("room_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "area_id",
            sa.Integer(),
            sa.ForeignKey("areas.area_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(120), nullable=False),
        sa.UniqueConstraint("area_id", "name", name="rooms_area_name_key"),
    )
    op.create_table(
        "locations",
        sa.Column("location_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "area_id",
            sa.Integer(),
            sa.ForeignKey("areas.area_id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "room_id",
            sa.Integer(),
            sa.ForeignKey("rooms.room_id", ondelete="RESTRICT"),
            nullable=True,
        ),
        sa.Column("details", sa.Text(), nullable=True),
    )
    op.create_index(
        "locations_area_room_details_key",
        "locations",
        ["area_id", sa.text("coalesce(room_id, 0)"), sa.text("coalesce(details, '')")],
        unique=True,
    )

    _lookup_table("device_types", "device_type_id", 80)
    _lookup_table("brands", "brand_id", 80)
    op.create_table(
        "device_models",
        sa.Column("model_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "brand_id",
            sa.Integer(),
            sa.ForeignKey("brands.brand_id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("value", sa.String(120), nullable=False),
        sa.UniqueConstraint("brand_id", "value", name="device_models_brand_value_key"),
    )
    _lookup_table("operating_systems", "os_id", 80)
    _lookup_table("ram_sizes", "ram_id", 40)
    _lookup_table("storage_sizes", "storage_id", 40)
    _lookup_table("processors", "processor_id", 120)


def downgrade() -> None:
    for table in (
        "processors",
        "storage_sizes",
        "ram_sizes",
        "operating_systems",
        "device_models",
        "brands",
        "device_types",
    ):
        op.drop_table(table)
    op.drop_index("locations_area_room_details_key", table_name="locations")
    op.drop_table("locations")
    op.drop_table("rooms")
    op.drop_table("areas")
    op.drop_table("floors")
    op.drop_table("buildings")
