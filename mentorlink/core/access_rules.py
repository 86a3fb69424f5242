"""Access Rules — pure checks applied before any message is read or written.

Invariants:
    - Only an ACCEPTED connection authorizes chat traffic between two users
    - Rejection is uniform: NONE and PENDING both raise the same UnauthorizedError,
      so an unauthorized caller learns nothing about pending requests
    - A message needs a non-blank body or a non-blank attachment

Design Decisions:
    - Blank strings normalized to None here, not in the schema: the service layer
      can be called without going through the HTTP boundary (ADR: core owns invariants)
"""

from uuid import UUID

from mentorlink.core.domain_types import ConnectionState
from mentorlink.core.errors import EmptyMessageError, ErrorContext, UnauthorizedError
from mentorlink.core.repository_protocols import ConnectionLike


def require_accepted(
    connection: ConnectionLike | None, requester_id: UUID, counterpart_id: UUID,
) -> ConnectionLike:
    """Return the connection if it is ACCEPTED and covers the pair, else raise."""
    if (
        connection is None
        or connection.state != ConnectionState.ACCEPTED
        or {connection.mentor_id, connection.mentee_id} != {requester_id, counterpart_id}
    ):
        raise UnauthorizedError(ErrorContext(
            user_id=str(requester_id), counterpart_id=str(counterpart_id),
        ))
    return connection


def normalize_content(
    body: str | None, attachment: str | None,
) -> tuple[str | None, str | None]:
    """Strip blank fields to None. Raises EmptyMessageError if nothing remains."""
    body = body if body and body.strip() else None
    attachment = attachment.strip() if attachment and attachment.strip() else None
    if body is None and attachment is None:
        raise EmptyMessageError()
    return body, attachment
