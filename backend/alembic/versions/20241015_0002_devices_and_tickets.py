"""Devices and workshop tickets."""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op


revision = "20241015_0002"
down_revision = "20241010_0001"
branch_labels = None
depends_on = None

TICKET_STATUSES = ("pending", "repaired", "unrepaired")


def upgrade() -> None:
    op.create_table(
        "devices",
        sa.Column("device_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("code", sa.String(60), nullable=True),
        sa.Column(
            "device_type_id",
            sa.Integer(),
            sa.ForeignKey("device_types.device_type_id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "location_id",
            sa.Integer(),
            sa.ForeignKey("locations.location_id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "brand_id",
            sa.Integer(),
            sa.ForeignKey("brands.brand_id", ondelete="RESTRICT"),
            nullable=True,
        ),
        sa.Column(
            "model_id",
            sa.Integer(),
            sa.ForeignKey("device_models.model_id", ondelete="RESTRICT"),
            nullable=True,
        ),
        sa.Column(
            "os_id",
            sa.Integer(),
            sa.ForeignKey("operating_systems.os_id", ondelete="RESTRICT"),
            nullable=True,
        ),
        sa.Column(
            "ram_id",
            sa.Integer(),
            sa.ForeignKey("ram_sizes.ram_id", ondelete="RESTRICT"),
            nullable=True,
        ),
        sa.Column(
            "storage_id",
            sa.Integer(),
            sa.ForeignKey("storage_sizes.storage_id", ondelete="RESTRICT"),
            nullable=True,
        ),
        sa.Column(
            "processor_id",
            sa.Integer(),
            sa.ForeignKey("processors.processor_id", ondelete="RESTRICT"),
            nullable=True,
        ),
        sa.Column("architecture", sa.String(20), nullable=True),
        sa.Column("serial", sa.String(120), nullable=True),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint("code", name="devices_code_key"),
        sa.CheckConstraint(
            "model_id IS NULL OR brand_id IS NOT NULL",
            name="ck_devices_model_requires_brand",
        ),
    )
    op.create_index("devices_location_idx", "devices", ["location_id"])
    op.create_index("devices_serial_idx", "devices", ["serial"])

    op.create_table(
        "tickets",
        sa.Column("ticket_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "device_id",
            sa.Integer(),
            sa.ForeignKey("devices.device_id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum(*TICKET_STATUSES, name="ticket_status_enum", native_enum=False),
            nullable=False,
        ),
        sa.Column("date_in", sa.Date(), nullable=False),
        sa.Column("date_out", sa.Date(), nullable=True),
        sa.Column("details_in", sa.Text(), nullable=True),
        sa.Column("details_out", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.CheckConstraint(
            "date_out IS NULL OR date_out >= date_in",
            name="ck_tickets_date_out_after_date_in",
        ),
    )
    op.create_index(
        "tickets_device_status_date_details_key",
        "tickets",
        ["device_id", "status", "date_in", sa.text("coalesce(details_in, '')")],
        unique=True,
    )
    op.create_index("tickets_status_date_out_idx", "tickets", ["status", "date_out"])


def downgrade() -> None:
    op.drop_index("tickets_status_date_out_idx", table_name="tickets")
    op.drop_index("tickets_device_status_date_details_key", table_name="tickets")
    op.drop_table("tickets")
    op.drop_index("devices_serial_idx", table_name="devices")
    op.drop_index("devices_location_idx", table_name="devices")
    op.drop_table("devices")
