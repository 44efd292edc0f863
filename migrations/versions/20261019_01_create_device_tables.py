"""create device registry tables

Revision ID: 5d0c7a3e9b21
Revises: 
Create Date: 2026-10-19 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5d0c7a3e9b21"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "computers",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("brand", sa.String(length=100), nullable=False),
        sa.Column("model", sa.String(length=100), nullable=False),
        sa.Column("color", sa.String(length=50)),
        sa.Column("owner_name", sa.String(length=150), nullable=False),
        sa.Column("owner_id", sa.String(length=100), nullable=False),
        sa.Column("photo_url", sa.String(length=500)),
        sa.Column("checkin_at", sa.DateTime()),
        sa.Column("checkout_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_computers_brand", "computers", ["brand"])
    op.create_index("ix_computers_owner_id", "computers", ["owner_id"])

    op.create_table(
        "frequent_computers",
        sa.Column("id", sa.String(length=36), sa.ForeignKey("computers.id"), primary_key=True),
        sa.Column("checkin_url", sa.String(length=500)),
        sa.Column("checkout_url", sa.String(length=500)),
    )

    op.create_table(
        "medical_devices",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("brand", sa.String(length=100), nullable=False),
        sa.Column("model", sa.String(length=100), nullable=False),
        sa.Column("serial", sa.String(length=100), nullable=False),
        sa.Column("owner_name", sa.String(length=150), nullable=False),
        sa.Column("owner_id", sa.String(length=100), nullable=False),
        sa.Column("photo_url", sa.String(length=500), nullable=False),
        sa.Column("checkin_at", sa.DateTime()),
        sa.Column("checkout_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_medical_devices_brand", "medical_devices", ["brand"])
    op.create_index("ix_medical_devices_serial", "medical_devices", ["serial"])
    op.create_index("ix_medical_devices_owner_id", "medical_devices", ["owner_id"])

    op.create_table(
        "device_index",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("device_type", sa.String(length=20), nullable=False),
    )

    op.create_table(
        "device_history",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("device_id", sa.String(length=36), nullable=False),
        sa.Column("device_type", sa.String(length=20), nullable=False),
        sa.Column("brand", sa.String(length=100), nullable=False),
        sa.Column("model", sa.String(length=100), nullable=False),
        sa.Column("owner_name", sa.String(length=150), nullable=False),
        sa.Column("owner_id", sa.String(length=100), nullable=False),
        sa.Column("event", sa.String(length=10), nullable=False),
        sa.Column("event_date", sa.DateTime(), nullable=False),
        sa.Column("serial", sa.String(length=100)),
        sa.Column("color", sa.String(length=50)),
    )
    op.create_index("ix_device_history_device_id", "device_history", ["device_id"])
    op.create_index("ix_device_history_device_type", "device_history", ["device_type"])
    op.create_index("ix_device_history_owner_id", "device_history", ["owner_id"])
    op.create_index("ix_device_history_event_date", "device_history", ["event_date"])


def downgrade() -> None:
    op.drop_index("ix_device_history_event_date", table_name="device_history")
    op.drop_index("ix_device_history_owner_id", table_name="device_history")
    op.drop_index("ix_device_history_device_type", table_name="device_history")
    op.drop_index("ix_device_history_device_id", table_name="device_history")
    op.drop_table("device_history")
    op.drop_table("device_index")
    op.drop_index("ix_medical_devices_owner_id", table_name="medical_devices")
    op.drop_index("ix_medical_devices_serial", table_name="medical_devices")
    op.drop_index("ix_medical_devices_brand", table_name="medical_devices")
    op.drop_table("medical_devices")
    op.drop_table("frequent_computers")
    op.drop_index("ix_computers_owner_id", table_name="computers")
    op.drop_index("ix_computers_brand", table_name="computers")
    op.drop_table("computers")
