"""User Directory — SQLAlchemy lookup of users for role guards and listings.

Invariants:
    - Read-only: this service never creates or mutates users
    - get_many preserves no particular order; callers sort if they need to

Design Decisions:
    - Thin adapter over the users table so tests and alternative directories
      (e.g. an auth service client) can satisfy core.repository_protocols.UserDirectory
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mentorlink.core.domain_types import Role
from mentorlink.models.user import User


class SqlUserDirectory:
    """UserDirectory backed by the users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user(self, user_id: UUID) -> User | None:
        return await self.db.get(User, user_id)

    async def get_many(self, user_ids: list[UUID]) -> list[User]:
        if not user_ids:
            return []
        result = await self.db.execute(select(User).where(User.id.in_(user_ids)))
        return list(result.scalars().all())

    async def list_by_role(self, role: Role) -> list[User]:
        result = await self.db.execute(
            select(User).where(User.role == role).order_by(User.full_name),
        )
        return list(result.scalars().all())
