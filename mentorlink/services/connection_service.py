"""Connection Service — request / accept / reject / remove and relationship listings.

Invariants:
    - Every transition loads current state, runs the pure guard, then performs one
      conditional write; a write that loses a race surfaces as NotFoundError
    - request() relies on the store's unique constraint as the final arbiter
    - Listings never expose pending requests to anyone but the addressed mentor

Design Decisions:
    - Guards in core/connection_rules.py, IO here (ADR: impureim sandwich)
    - Unknown user ids raise NotFoundError("User") before any role check
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from mentorlink.core.connection_rules import (
    check_remove,
    check_request,
    check_respond,
    next_state,
    other_party,
)
from mentorlink.core.domain_types import (
    ConnectionAction, ConnectionState, MentorStatus, Role,
)
from mentorlink.core.errors import (
    ErrorContext, InvalidRoleError, NotFoundError,
)
from mentorlink.core.repository_protocols import (
    ConnectionLike, ConnectionRepository, UserDirectory, UserLike,
)
from mentorlink.services.access_guard import AccessGuard

logger = logging.getLogger(__name__)


@dataclass
class PendingRequest:
    """A pending connection paired with the mentee who sent it."""
    connection: ConnectionLike
    mentee: UserLike


@dataclass
class MentorListing:
    """A mentor as seen from one mentee's directory, with their connection status."""
    mentor: UserLike
    status: MentorStatus


class ConnectionService:
    """Drives the connection state machine against the stores."""

    def __init__(self, users: UserDirectory, connections: ConnectionRepository):
        self.users = users
        self.connections = connections
        self.guard = AccessGuard(connections)

    async def _require_user(self, user_id: UUID) -> UserLike:
        user = await self.users.get_user(user_id)
        if user is None:
            raise NotFoundError("User", str(user_id))
        return user

    # ─── Transitions ────────────────────────────────────────────

    async def request_connection(
        self, mentee_id: UUID, mentor_id: UUID,
    ) -> ConnectionLike:
        """Mentee asks mentor to connect. Creates a PENDING record."""
        mentee = await self._require_user(mentee_id)
        mentor = await self._require_user(mentor_id)
        existing = await self.connections.find_by_pair(mentee_id, mentor_id)
        check_request(mentee, mentor, existing)

        connection = await self.connections.insert(mentor_id, mentee_id)
        logger.info(
            "Connection requested",
            extra={
                "user_id": str(mentee_id), "counterpart_id": str(mentor_id),
                "connection_id": str(connection.id),
            },
        )
        return connection

    async def accept_connection(
        self, mentor_id: UUID, mentee_id: UUID,
    ) -> ConnectionLike:
        """Mentor accepts a pending request. PENDING -> ACCEPTED."""
        existing = await self.connections.find_by_pair(mentor_id, mentee_id)
        pending = check_respond(
            mentor_id, mentee_id, existing, ConnectionAction.ACCEPT,
        )
        target = next_state(pending.state, ConnectionAction.ACCEPT)
        if not await self.connections.update_state(
            pending.id, target, expected=ConnectionState.PENDING,
        ):
            raise self._lost_race(mentor_id, mentee_id, "Pending request")

        accepted = await self.connections.get(pending.id)
        if accepted is None:
            raise self._lost_race(mentor_id, mentee_id, "Pending request")
        logger.info(
            "Connection accepted",
            extra={
                "user_id": str(mentor_id), "counterpart_id": str(mentee_id),
                "connection_id": str(pending.id),
            },
        )
        return accepted

    async def reject_connection(self, mentor_id: UUID, mentee_id: UUID) -> None:
        """Mentor rejects a pending request. PENDING -> NONE (record deleted)."""
        existing = await self.connections.find_by_pair(mentor_id, mentee_id)
        pending = check_respond(
            mentor_id, mentee_id, existing, ConnectionAction.REJECT,
        )
        if not await self.connections.delete(
            pending.id, expected=ConnectionState.PENDING,
        ):
            raise self._lost_race(mentor_id, mentee_id, "Pending request")
        logger.info(
            "Connection rejected",
            extra={"user_id": str(mentor_id), "counterpart_id": str(mentee_id)},
        )

    async def remove_connection(self, actor_id: UUID, other_id: UUID) -> None:
        """Either party removes an accepted connection. ACCEPTED -> NONE."""
        existing = await self.connections.find_by_pair(actor_id, other_id)
        accepted = check_remove(actor_id, other_id, existing)
        if not await self.connections.delete(
            accepted.id, expected=ConnectionState.ACCEPTED,
        ):
            raise self._lost_race(actor_id, other_id, "Connection")
        logger.info(
            "Connection removed",
            extra={"user_id": str(actor_id), "counterpart_id": str(other_id)},
        )

    @staticmethod
    def _lost_race(actor_id: UUID, other_id: UUID, resource: str) -> NotFoundError:
        logger.warning(
            "Conditional write matched no row; state changed concurrently",
            extra={"user_id": str(actor_id), "counterpart_id": str(other_id)},
        )
        return NotFoundError(resource, str(other_id), ErrorContext(
            user_id=str(actor_id), counterpart_id=str(other_id),
        ))

    # ─── Listings ───────────────────────────────────────────────

    async def list_accepted_counterparts(self, user_id: UUID) -> list[UserLike]:
        """Users the given user may chat with (the conversation list)."""
        ids = await self.guard.reachable_counterparts(user_id)
        users = {u.id: u for u in await self.users.get_many(ids)}
        return [users[i] for i in ids if i in users]

    async def list_connections(self, user_id: UUID) -> dict[str, list[UserLike]]:
        """Accepted counterparts split by the role they play relative to user_id."""
        accepted = await self.connections.list_for_user(
            user_id, ConnectionState.ACCEPTED,
        )
        users = {
            u.id: u for u in await self.users.get_many(
                [other_party(c, user_id) for c in accepted],
            )
        }
        mentors = [
            users[c.mentor_id] for c in accepted
            if c.mentee_id == user_id and c.mentor_id in users
        ]
        mentees = [
            users[c.mentee_id] for c in accepted
            if c.mentor_id == user_id and c.mentee_id in users
        ]
        return {"mentors": mentors, "mentees": mentees}

    async def list_pending_requests(self, mentor_id: UUID) -> list[PendingRequest]:
        """Pending requests addressed to a mentor, oldest first."""
        mentor = await self._require_user(mentor_id)
        if mentor.role != Role.MENTOR:
            raise InvalidRoleError(
                "Only mentors can view pending requests",
                ErrorContext(user_id=str(mentor_id)),
            )
        pending = await self.connections.list_pending_for_mentor(mentor_id)
        mentees = {
            u.id: u for u in await self.users.get_many([c.mentee_id for c in pending])
        }
        return [
            PendingRequest(connection=c, mentee=mentees[c.mentee_id])
            for c in pending if c.mentee_id in mentees
        ]

    async def list_mentors_with_status(self, mentee_id: UUID) -> list[MentorListing]:
        """Every mentor, annotated with the mentee's connection status toward them."""
        mentee = await self._require_user(mentee_id)
        if mentee.role != Role.MENTEE:
            raise InvalidRoleError(
                "Only mentees can view mentors",
                ErrorContext(user_id=str(mentee_id)),
            )
        mentors = await self.users.list_by_role(Role.MENTOR)
        status_by_mentor = {
            c.mentor_id: MentorStatus(ConnectionState(c.state).value)
            for c in await self.connections.list_for_user(mentee_id)
        }
        return [
            MentorListing(
                mentor=m,
                status=status_by_mentor.get(m.id, MentorStatus.NOT_REQUESTED),
            )
            for m in mentors
        ]
