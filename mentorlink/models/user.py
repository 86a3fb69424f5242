"""User ORM — read-only view of accounts created by the external registration flow.

Invariants:
    - role is one of Role (mentor | mentee), never mutated by this service
    - email is unique

Design Decisions:
    - Only the fields listings need (name, email, picture); credentials live elsewhere
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from mentorlink.core.domain_types import Role
from mentorlink.db.base import Base


class User(Base):
    """Platform user — mentor or mentee."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(320), nullable=False, unique=True,
    )
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    profile_pic: Mapped[str] = mapped_column(
        String(2048), nullable=False, default="",
    )
    role: Mapped[Role] = mapped_column(
        SAEnum(
            Role, native_enum=False, length=10,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
