"""Connection Store — persistence of Connection records with pair uniqueness.

Invariants:
    - insert() relies on the (mentor_id, mentee_id) unique constraint; a losing
      concurrent insert surfaces as AlreadyRequestedError, never a duplicate row
    - update_state()/delete() are conditional on the expected state and report
      whether exactly one row changed (zero rows = lost race or wrong state)
    - Every symmetric (either-ordering) pair query is built in _pair_clause only

Design Decisions:
    - Conditional UPDATE/DELETE over SELECT ... FOR UPDATE: works identically on
      PostgreSQL and SQLite, no lock held across awaits (ADR: no cross-request locking)
    - Each write commits immediately: every store operation is its own unit of work
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import and_, delete, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mentorlink.core.domain_types import ConnectionState
from mentorlink.core.errors import AlreadyRequestedError, ErrorContext
from mentorlink.models.connection import Connection

logger = logging.getLogger(__name__)


def _pair_clause(a: UUID, b: UUID):
    """Match the pair regardless of which one is stored as mentor."""
    return or_(
        and_(Connection.mentor_id == a, Connection.mentee_id == b),
        and_(Connection.mentor_id == b, Connection.mentee_id == a),
    )


class SqlConnectionStore:
    """ConnectionRepository backed by the connections table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert(self, mentor_id: UUID, mentee_id: UUID) -> Connection:
        """Create a PENDING connection. Raises AlreadyRequestedError on a duplicate pair."""
        connection = Connection(
            mentor_id=mentor_id, mentee_id=mentee_id,
            state=ConnectionState.PENDING,
        )
        self.db.add(connection)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning(
                "Duplicate connection insert rejected by unique constraint",
                extra={"user_id": str(mentee_id), "counterpart_id": str(mentor_id)},
            )
            raise AlreadyRequestedError(ErrorContext(
                user_id=str(mentee_id), counterpart_id=str(mentor_id),
            ))
        return connection

    async def get(self, connection_id: UUID) -> Connection | None:
        return await self.db.get(
            Connection, connection_id, populate_existing=True,
        )

    async def find_by_pair(self, a: UUID, b: UUID) -> Connection | None:
        result = await self.db.execute(
            select(Connection).where(_pair_clause(a, b)),
        )
        return result.scalar_one_or_none()

    async def find_accepted_between(self, a: UUID, b: UUID) -> Connection | None:
        """Single lookup used by the access guard: ACCEPTED state, either ordering."""
        result = await self.db.execute(
            select(Connection).where(
                _pair_clause(a, b),
                Connection.state == ConnectionState.ACCEPTED,
            ),
        )
        return result.scalar_one_or_none()

    async def update_state(
        self, connection_id: UUID, new_state: ConnectionState,
        expected: ConnectionState,
    ) -> bool:
        result = await self.db.execute(
            update(Connection)
            .where(Connection.id == connection_id)
            .where(Connection.state == expected)
            .values(state=new_state, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False),
        )
        await self.db.commit()
        return result.rowcount == 1

    async def delete(
        self, connection_id: UUID, expected: ConnectionState,
    ) -> bool:
        result = await self.db.execute(
            delete(Connection)
            .where(Connection.id == connection_id)
            .where(Connection.state == expected)
            .execution_options(synchronize_session=False),
        )
        await self.db.commit()
        return result.rowcount == 1

    async def list_for_user(
        self, user_id: UUID, state: ConnectionState | None = None,
    ) -> list[Connection]:
        query = select(Connection).where(
            or_(Connection.mentor_id == user_id, Connection.mentee_id == user_id),
        )
        if state is not None:
            query = query.where(Connection.state == state)
        result = await self.db.execute(query.order_by(Connection.created_at))
        return list(result.scalars().all())

    async def list_pending_for_mentor(self, mentor_id: UUID) -> list[Connection]:
        result = await self.db.execute(
            select(Connection)
            .where(Connection.mentor_id == mentor_id)
            .where(Connection.state == ConnectionState.PENDING)
            .order_by(Connection.created_at),
        )
        return list(result.scalars().all())
