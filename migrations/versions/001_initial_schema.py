"""Initial schema: the rides table.

Revision ID: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── rides ─────────────────────────────────────────────────────────
    op.create_table(
        "rides",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("pickup", sa.Text, nullable=False),
        sa.Column("destination", sa.Text, nullable=False),
        sa.Column("city", sa.Text, nullable=False),
        sa.Column("estimate", sa.Float, nullable=False),
        sa.Column("offered_price", sa.Float, nullable=True),
        sa.Column(
            "status",
            sa.Enum(
                "REQUESTED",
                "ACCEPTED",
                "ARRIVING",
                "IN_PROGRESS",
                "COMPLETED",
                "CANCELLED",
                name="ridestatus",
            ),
            nullable=False,
            server_default="REQUESTED",
        ),
        sa.Column("driver_name", sa.String(120), nullable=True),
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
    )
    op.create_index("idx_rides_status", "rides", ["status"])
    op.create_index("idx_rides_created", "rides", ["created_at"])


def downgrade() -> None:
    op.drop_table("rides")
    op.execute("DROP TYPE IF EXISTS ridestatus")
