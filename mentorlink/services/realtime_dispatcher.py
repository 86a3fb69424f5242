"""Realtime Dispatcher — pushes newly persisted messages to the recipient's live session.

Invariants:
    - dispatch() is called only after the message is durable
    - Absent recipient = no-op; the message is picked up by the next fetch
    - At-most-once: a failed push is not retried

Design Decisions:
    - Registry and channel injected: the dispatcher owns neither sockets nor persistence
"""

import logging

from mentorlink.core.domain_types import RealtimeEvent
from mentorlink.core.presence_registry import PresenceRegistry
from mentorlink.core.repository_protocols import MessageLike, PushChannel
from mentorlink.schemas.message import message_payload

logger = logging.getLogger(__name__)


class RealtimeDispatcher:
    """Routes new messages to the recipient's active session, if any."""

    def __init__(self, registry: PresenceRegistry, channel: PushChannel):
        self.registry = registry
        self.channel = channel

    async def dispatch(self, message: MessageLike) -> bool:
        """Push message to its recipient. True if a live session accepted it."""
        session_token = self.registry.lookup(message.recipient_id)
        if session_token is None:
            return False
        delivered = await self.channel.push(session_token, {
            "type": RealtimeEvent.NEW_MESSAGE.value,
            "message": message_payload(message),
        })
        if not delivered:
            logger.warning(
                "Realtime delivery failed; message remains available via fetch",
                extra={
                    "message_id": str(message.id),
                    "user_id": str(message.recipient_id),
                    "session_token": session_token,
                },
            )
        return delivered
