"""Initial schema — users, connections, messages.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("full_name", sa.String(100), nullable=False),
        sa.Column("profile_pic", sa.String(2048), nullable=False, server_default=""),
        sa.Column("role", sa.String(10), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("role IN ('mentor', 'mentee')", name="ck_users_role"),
    )

    op.create_table(
        "connections",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("mentor_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("mentee_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("state", sa.String(10), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("mentor_id", "mentee_id", name="uq_connections_pair"),
        sa.CheckConstraint("state IN ('pending', 'accepted')", name="ck_connections_state"),
    )
    op.create_index("ix_connections_mentor_id", "connections", ["mentor_id"])
    op.create_index("ix_connections_mentee_id", "connections", ["mentee_id"])

    op.create_table(
        "messages",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("sender_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("recipient_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("body", sa.Text, nullable=True),
        sa.Column("attachment", sa.String(2048), nullable=True),
        sa.Column("connection_id", UUID(as_uuid=True), sa.ForeignKey("connections.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("body IS NOT NULL OR attachment IS NOT NULL", name="ck_messages_content"),
    )
    op.create_index(
        "ix_messages_pair_created", "messages",
        ["sender_id", "recipient_id", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_messages_pair_created", table_name="messages")
    op.drop_table("messages")
    op.drop_index("ix_connections_mentee_id", table_name="connections")
    op.drop_index("ix_connections_mentor_id", table_name="connections")
    op.drop_table("connections")
    op.drop_table("users")
