"""Access Guard — the single authorization gate for all message reads and writes.

Invariants:
    - authorize() performs exactly one store lookup (ACCEPTED, either ordering)
    - Failure is always UnauthorizedError, identical for NONE and PENDING
    - Used by fetch, send and the conversation list; no caller re-implements the check

Design Decisions:
    - Pure decision in core/access_rules.require_accepted, IO here (ADR: impureim sandwich)
"""

import logging
from uuid import UUID

from mentorlink.core.access_rules import require_accepted
from mentorlink.core.connection_rules import other_party
from mentorlink.core.domain_types import ConnectionState
from mentorlink.core.repository_protocols import ConnectionLike, ConnectionRepository

logger = logging.getLogger(__name__)


class AccessGuard:
    """Resolves the ACCEPTED connection that authorizes traffic between two users."""

    def __init__(self, connections: ConnectionRepository):
        self.connections = connections

    async def authorize(self, requester_id: UUID, counterpart_id: UUID) -> ConnectionLike:
        connection = await self.connections.find_accepted_between(
            requester_id, counterpart_id,
        )
        if connection is None:
            logger.info(
                "Access denied: no accepted connection",
                extra={"user_id": str(requester_id), "counterpart_id": str(counterpart_id)},
            )
        return require_accepted(connection, requester_id, counterpart_id)

    async def reachable_counterparts(self, user_id: UUID) -> list[UUID]:
        """Ids of every user the given user may currently chat with."""
        connections = await self.connections.list_for_user(
            user_id, ConnectionState.ACCEPTED,
        )
        return [other_party(c, user_id) for c in connections]
