"""Connection State Machine — legal transitions and the guards on who may trigger them.

Invariants:
    - States: NONE (no record) -> PENDING -> ACCEPTED; PENDING -> NONE (reject);
      ACCEPTED -> NONE (remove). Nothing else is legal.
    - Only a mentee may request, and only a mentor may be requested
    - Only the mentor named on a pending record may accept or reject it
    - Either party may remove an accepted connection
    - All checks are PURE: they raise on violation and never touch storage

Design Decisions:
    - TRANSITIONS table is the single source of truth; guard functions consult it
      instead of re-encoding state checks (ADR: no duplicated state logic)
    - None stands for the NONE state so callers pass store lookups straight through
    - Role checks are exhaustive over the Role enum, never string comparisons
"""

from uuid import UUID

from mentorlink.core.domain_types import ConnectionAction, ConnectionState, Role
from mentorlink.core.errors import (
    AlreadyConnectedError,
    AlreadyRequestedError,
    ErrorContext,
    ForbiddenError,
    InvalidRoleError,
    NotFoundError,
)
from mentorlink.core.repository_protocols import ConnectionLike, UserLike


# (current state, action) -> next state; None is the NONE state
TRANSITIONS: dict[tuple[ConnectionState | None, ConnectionAction], ConnectionState | None] = {
    (None, ConnectionAction.REQUEST): ConnectionState.PENDING,
    (ConnectionState.PENDING, ConnectionAction.ACCEPT): ConnectionState.ACCEPTED,
    (ConnectionState.PENDING, ConnectionAction.REJECT): None,
    (ConnectionState.ACCEPTED, ConnectionAction.REMOVE): None,
}


def is_legal(current: ConnectionState | None, action: ConnectionAction) -> bool:
    """True when the action may be applied from the current state."""
    return (current, action) in TRANSITIONS


def next_state(
    current: ConnectionState | None, action: ConnectionAction,
) -> ConnectionState | None:
    """Resulting state after a legal transition. Raises KeyError when illegal."""
    return TRANSITIONS[(current, action)]


def state_of(connection: ConnectionLike | None) -> ConnectionState | None:
    return connection.state if connection is not None else None


def check_request(
    actor: UserLike, target: UserLike, existing: ConnectionLike | None,
) -> None:
    """Guard for request(mentee, mentor). Raises on any violation."""
    context = ErrorContext(user_id=str(actor.id), counterpart_id=str(target.id))
    if actor.role != Role.MENTEE:
        raise InvalidRoleError("Only mentees can send mentor requests", context)
    if target.role != Role.MENTOR:
        raise InvalidRoleError("Requests can only be sent to mentors", context)

    current = state_of(existing)
    if current == ConnectionState.PENDING:
        raise AlreadyRequestedError(context)
    if current == ConnectionState.ACCEPTED:
        raise AlreadyConnectedError(context)


def check_respond(
    actor_id: UUID, counterpart_id: UUID, existing: ConnectionLike | None,
    action: ConnectionAction,
) -> ConnectionLike:
    """Guard shared by accept and reject. Returns the pending record on success."""
    context = ErrorContext(user_id=str(actor_id), counterpart_id=str(counterpart_id))
    if existing is None or not is_legal(existing.state, action):
        raise NotFoundError("Pending request", str(counterpart_id), context)
    context.connection_id = str(existing.id)
    if existing.mentor_id != actor_id:
        raise ForbiddenError(
            f"Only the requested mentor can {action.value} this request", context,
        )
    return existing


def check_remove(
    actor_id: UUID, counterpart_id: UUID, existing: ConnectionLike | None,
) -> ConnectionLike:
    """Guard for remove(either party). Returns the accepted record on success."""
    context = ErrorContext(user_id=str(actor_id), counterpart_id=str(counterpart_id))
    if existing is None or not is_legal(existing.state, ConnectionAction.REMOVE):
        raise NotFoundError("Connection", str(counterpart_id), context)
    if actor_id not in (existing.mentor_id, existing.mentee_id):
        raise ForbiddenError("Only a party to the connection can remove it", context)
    return existing


def other_party(connection: ConnectionLike, user_id: UUID) -> UUID:
    """The other party of a connection, from the perspective of user_id."""
    if connection.mentor_id == user_id:
        return connection.mentee_id
    if connection.mentee_id == user_id:
        return connection.mentor_id
    raise ValueError(f"User {user_id} is not a party to connection {connection.id}")
