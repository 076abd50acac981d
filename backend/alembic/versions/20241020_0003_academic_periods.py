"""Academic periods used to group ticket history."""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op


revision = "20241020_0003"
down_revision = "20241015_0002"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "academic_periods",
        sa.Column("code", sa.String(16), primary_key=True),
        sa.Column("starts_on", sa.Date(), nullable=False),
        sa.Column("ends_on", sa.Date(), nullable=False),
        sa.CheckConstraint("ends_on >= starts_on", name="ck_academic_periods_valid_range"),
    )
    op.create_index("academic_periods_starts_on_idx", "academic_periods", ["starts_on"])


def downgrade() -> None:
    op.drop_index("academic_periods_starts_on_idx", table_name="academic_periods")
    op.drop_table("academic_periods")
