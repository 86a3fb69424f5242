"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection
    - ConnectionRepository owns the symmetric (either-ordering) lookup; callers never
      build the two-ordering query themselves

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions that USE these protocols are never async themselves —
      the shell orchestrates the async calls around the pure logic
    - update_state/delete take the expected state: conditional writes resolve
      accept/reject races without cross-request locks
"""

from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from mentorlink.core.domain_types import (
    ConnectionId, ConnectionState, Role, SessionToken, UserId,
)


class UserLike(Protocol):
    """Structural contract for users returned by the directory."""
    id: UUID
    role: Role
    full_name: str
    email: str
    profile_pic: str


class ConnectionLike(Protocol):
    """Structural contract for Connection records."""
    id: UUID
    mentor_id: UUID
    mentee_id: UUID
    state: ConnectionState
    created_at: datetime
    updated_at: datetime


class MessageLike(Protocol):
    """Structural contract for persisted messages."""
    id: UUID
    sender_id: UUID
    recipient_id: UUID
    body: str | None
    attachment: str | None
    connection_id: UUID | None
    created_at: datetime


class UserDirectory(Protocol):
    """Contract for user lookup — implemented by shell."""
    async def get_user(self, user_id: UserId) -> UserLike | None: ...
    async def get_many(self, user_ids: list[UserId]) -> list[UserLike]: ...
    async def list_by_role(self, role: Role) -> list[UserLike]: ...


class ConnectionRepository(Protocol):
    """Contract for connection persistence — implemented by shell."""
    async def insert(
        self, mentor_id: UserId, mentee_id: UserId,
    ) -> ConnectionLike: ...
    async def get(self, connection_id: ConnectionId) -> ConnectionLike | None: ...
    async def find_by_pair(
        self, a: UserId, b: UserId,
    ) -> ConnectionLike | None: ...
    async def find_accepted_between(
        self, a: UserId, b: UserId,
    ) -> ConnectionLike | None: ...
    async def update_state(
        self, connection_id: ConnectionId, new_state: ConnectionState,
        expected: ConnectionState,
    ) -> bool: ...
    async def delete(
        self, connection_id: ConnectionId, expected: ConnectionState,
    ) -> bool: ...
    async def list_for_user(
        self, user_id: UserId, state: ConnectionState | None = None,
    ) -> list[ConnectionLike]: ...
    async def list_pending_for_mentor(
        self, mentor_id: UserId,
    ) -> list[ConnectionLike]: ...


class MessageRepository(Protocol):
    """Contract for message persistence — implemented by shell."""
    async def insert(
        self,
        sender_id: UserId,
        recipient_id: UserId,
        connection_id: ConnectionId,
        body: str | None,
        attachment: str | None,
    ) -> MessageLike: ...
    async def query_by_pair(self, a: UserId, b: UserId) -> list[MessageLike]: ...


class PushChannel(Protocol):
    """Contract for the hosting transport layer — delivers payloads to live sessions."""
    async def push(self, session_token: SessionToken, payload: dict[str, Any]) -> bool: ...
    async def broadcast(self, payload: dict[str, Any]) -> None: ...
    async def close(
        self, session_token: SessionToken, code: int, reason: str = "",
    ) -> None: ...
