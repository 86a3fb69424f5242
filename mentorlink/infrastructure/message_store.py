"""Message Store — append-only persistence of chat messages.

Invariants:
    - insert() is the only write; messages are never updated or deleted here
    - query_by_pair() returns both directions, oldest first

Design Decisions:
    - No pagination: full history per pair (acceptable at mentorship chat volumes)
"""

from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from mentorlink.models.message import Message


class SqlMessageStore:
    """MessageRepository backed by the messages table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert(
        self,
        sender_id: UUID,
        recipient_id: UUID,
        connection_id: UUID,
        body: str | None,
        attachment: str | None,
    ) -> Message:
        message = Message(
            sender_id=sender_id,
            recipient_id=recipient_id,
            connection_id=connection_id,
            body=body,
            attachment=attachment,
        )
        self.db.add(message)
        await self.db.commit()
        return message

    async def query_by_pair(self, a: UUID, b: UUID) -> list[Message]:
        result = await self.db.execute(
            select(Message)
            .where(or_(
                and_(Message.sender_id == a, Message.recipient_id == b),
                and_(Message.sender_id == b, Message.recipient_id == a),
            ))
            .order_by(Message.created_at.asc()),
        )
        return list(result.scalars().all())
