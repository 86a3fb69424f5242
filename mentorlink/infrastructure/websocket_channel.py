"""WebSocket Push Channel — delivers realtime payloads to live client sockets.

Invariants:
    - One token per accepted socket; tokens are never reused
    - push() is best-effort and at-most-once: a failed send is logged, never retried
    - A socket whose send fails is dropped from the channel

Design Decisions:
    - Token indirection: the presence registry stores opaque tokens, not WebSocket
      objects, so core never depends on the transport (ADR: core never imports shell)
    - broadcast() sends sequentially; presence snapshots are small and fan-out is
      bounded by one process's sockets
"""

import logging
import uuid
from typing import Any

from fastapi import WebSocket

from mentorlink.core.domain_types import SessionToken

logger = logging.getLogger(__name__)


class WebSocketPushChannel:
    """PushChannel implementation over FastAPI WebSockets."""

    def __init__(self) -> None:
        self._sockets: dict[SessionToken, WebSocket] = {}

    def attach(self, websocket: WebSocket) -> SessionToken:
        """Track an accepted socket and return its session token."""
        token = SessionToken(uuid.uuid4().hex)
        self._sockets[token] = websocket
        return token

    def detach(self, token: SessionToken) -> None:
        self._sockets.pop(token, None)

    def is_attached(self, token: SessionToken) -> bool:
        return token in self._sockets

    async def push(self, session_token: SessionToken, payload: dict[str, Any]) -> bool:
        """Send payload to one session. False if the session is gone or the send failed."""
        websocket = self._sockets.get(session_token)
        if websocket is None:
            return False
        try:
            await websocket.send_json(payload)
            return True
        except Exception as e:
            logger.warning(
                f"Push failed, dropping socket: {e}",
                extra={"session_token": session_token},
            )
            self.detach(session_token)
            return False

    async def broadcast(self, payload: dict[str, Any]) -> None:
        for token in list(self._sockets):
            await self.push(token, payload)

    async def close(
        self, session_token: SessionToken, code: int, reason: str = "",
    ) -> None:
        """Close and forget one session's socket."""
        websocket = self._sockets.pop(session_token, None)
        if websocket is None:
            return
        try:
            await websocket.close(code=code, reason=reason)
        except Exception as e:
            logger.debug(
                f"Close on dead socket ignored: {e}",
                extra={"session_token": session_token},
            )
