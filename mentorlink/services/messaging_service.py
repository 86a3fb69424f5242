"""Messaging Service — send and fetch chat messages behind the access guard.

Invariants:
    - Content is validated before the guard runs: an empty send reveals nothing
      about the relationship
    - A message is persisted with the connection that authorized it, then dispatched
    - Dispatch failure never undoes or fails a send (durability is the store's job)
    - fetch returns both directions, oldest first

Design Decisions:
    - Dispatcher optional: background jobs and tests can send without a realtime layer
"""

import logging
from uuid import UUID

from mentorlink.core.access_rules import normalize_content
from mentorlink.core.repository_protocols import MessageLike, MessageRepository
from mentorlink.services.access_guard import AccessGuard
from mentorlink.services.realtime_dispatcher import RealtimeDispatcher

logger = logging.getLogger(__name__)


class MessagingService:
    """Connection-gated message send/fetch."""

    def __init__(
        self,
        guard: AccessGuard,
        messages: MessageRepository,
        dispatcher: RealtimeDispatcher | None = None,
    ):
        self.guard = guard
        self.messages = messages
        self.dispatcher = dispatcher

    async def send_message(
        self,
        sender_id: UUID,
        recipient_id: UUID,
        body: str | None = None,
        attachment: str | None = None,
    ) -> MessageLike:
        body, attachment = normalize_content(body, attachment)
        connection = await self.guard.authorize(sender_id, recipient_id)
        message = await self.messages.insert(
            sender_id=sender_id,
            recipient_id=recipient_id,
            connection_id=connection.id,
            body=body,
            attachment=attachment,
        )
        logger.info(
            "Message sent",
            extra={
                "message_id": str(message.id), "user_id": str(sender_id),
                "counterpart_id": str(recipient_id),
                "connection_id": str(connection.id),
            },
        )
        if self.dispatcher is not None:
            await self.dispatcher.dispatch(message)
        return message

    async def fetch_messages(
        self, viewer_id: UUID, counterpart_id: UUID,
    ) -> list[MessageLike]:
        await self.guard.authorize(viewer_id, counterpart_id)
        return await self.messages.query_by_pair(viewer_id, counterpart_id)
