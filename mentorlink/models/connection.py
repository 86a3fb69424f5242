"""Connection ORM — the persisted mentor/mentee relationship and its approval state.

Invariants:
    - (mentor_id, mentee_id) is unique: one record per pair, whatever its state
    - state is pending | accepted; a missing row is the NONE state
    - updated_at refreshed on every state change

Design Decisions:
    - Directional columns (mentor/mentee) over a canonical unordered key: every pair has
      exactly one mentor and one mentee, so the ordered unique index already covers
      the unordered pair
    - Cascade delete from users: a removed account takes its relationships with it
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from mentorlink.core.domain_types import ConnectionState
from mentorlink.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Connection(Base):
    """Mentor/mentee relationship record."""
    __tablename__ = "connections"
    __table_args__ = (
        UniqueConstraint("mentor_id", "mentee_id", name="uq_connections_pair"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    mentor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    mentee_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    state: Mapped[ConnectionState] = mapped_column(
        SAEnum(
            ConnectionState, native_enum=False, length=10,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False, default=ConnectionState.PENDING,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )
