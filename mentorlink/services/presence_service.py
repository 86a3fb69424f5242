"""Presence Service — connect/disconnect lifecycle on top of the PresenceRegistry.

Invariants:
    - on_user_connected always leaves the new session registered
    - A displaced session is told (session_superseded) and closed, never silently orphaned
    - on_user_disconnected with a stale session leaves the newer entry intact
    - Membership changes broadcast an online_users snapshot to every socket

Design Decisions:
    - Close code 4000 for superseded sessions: application range, lets the client
      distinguish takeover from network loss
"""

import logging
from uuid import UUID

from mentorlink.core.domain_types import RealtimeEvent, SessionToken
from mentorlink.core.presence_registry import PresenceRegistry
from mentorlink.core.repository_protocols import PushChannel

logger = logging.getLogger(__name__)

SUPERSEDED_CLOSE_CODE = 4000


class PresenceService:
    """Tracks which users are reachable for realtime delivery."""

    def __init__(
        self,
        registry: PresenceRegistry,
        channel: PushChannel,
        broadcast_enabled: bool = True,
    ):
        self.registry = registry
        self.channel = channel
        self.broadcast_enabled = broadcast_enabled

    async def on_user_connected(self, user_id: UUID, session: SessionToken) -> None:
        displaced = self.registry.register(user_id, session)
        logger.info(
            "User connected",
            extra={"user_id": str(user_id), "session_token": session},
        )
        if displaced is not None:
            logger.info(
                "Previous session superseded",
                extra={"user_id": str(user_id), "session_token": displaced},
            )
            await self.channel.push(
                displaced, {"type": RealtimeEvent.SESSION_SUPERSEDED.value},
            )
            await self.channel.close(
                displaced, SUPERSEDED_CLOSE_CODE, "superseded by a newer session",
            )
        await self._broadcast_snapshot()

    async def on_user_disconnected(self, user_id: UUID, session: SessionToken) -> None:
        removed = self.registry.unregister(user_id, session)
        logger.info(
            "User disconnected" if removed else "Stale disconnect ignored",
            extra={"user_id": str(user_id), "session_token": session},
        )
        if removed:
            await self._broadcast_snapshot()

    def is_online(self, user_id: UUID) -> bool:
        return self.registry.is_online(user_id)

    def list_online_users(self) -> list[UUID]:
        return self.registry.online_user_ids()

    async def _broadcast_snapshot(self) -> None:
        if not self.broadcast_enabled:
            return
        await self.channel.broadcast({
            "type": RealtimeEvent.ONLINE_USERS.value,
            "user_ids": [str(u) for u in self.registry.online_user_ids()],
        })
