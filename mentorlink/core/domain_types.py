"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, ConnectionId, MessageId wrap UUIDs — never use bare UUID in domain logic
    - SessionToken identifies one live transport session (opaque string)
    - Roles and connection states are closed Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders and compare equal to DB strings
    - No REJECTED state: rejection deletes the record so the mentee may request again
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
ConnectionId = NewType("ConnectionId", UUID)
MessageId = NewType("MessageId", UUID)
SessionToken = NewType("SessionToken", str)


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """User role — assigned at registration, never mutated by this core."""
    MENTOR = "mentor"
    MENTEE = "mentee"


class ConnectionState(str, Enum):
    """Persisted connection states. Absence of a record is the NONE state."""
    PENDING = "pending"
    ACCEPTED = "accepted"


class ConnectionAction(str, Enum):
    """The four transitions of the relationship state machine."""
    REQUEST = "request"
    ACCEPT = "accept"
    REJECT = "reject"
    REMOVE = "remove"


class MentorStatus(str, Enum):
    """Connection status of a mentor as seen from one mentee's directory listing."""
    NOT_REQUESTED = "not_requested"
    PENDING = "pending"
    ACCEPTED = "accepted"


class RealtimeEvent(str, Enum):
    """Event types pushed over the realtime channel."""
    NEW_MESSAGE = "new_message"
    ONLINE_USERS = "online_users"
    SESSION_SUPERSEDED = "session_superseded"
