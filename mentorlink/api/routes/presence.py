"""Presence Routes — online status queries and the realtime WebSocket session.

Invariants:
    - A WebSocket session is registered only after the user id resolves to a real user
    - Disconnect always detaches the socket and unregisters with ITS OWN token,
      so a stale disconnect cannot evict a newer session
    - Client frames are ignored; the socket is receive-only from the client's side

Design Decisions:
    - Identity via ?user_id= query parameter: browsers cannot set headers on
      WebSocket handshakes
    - User lookup uses db_manager directly: a request-scoped session must not stay
      open for the lifetime of the socket
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, WebSocket

from mentorlink.api.dependencies import (
    get_current_user, get_presence_service, get_push_channel, parse_user_id,
)
from mentorlink.core.errors import NotFoundError
from mentorlink.infrastructure.user_directory import SqlUserDirectory
from mentorlink.infrastructure.websocket_channel import WebSocketPushChannel
from mentorlink.models.user import User
from mentorlink.schemas.presence import OnlineUsersResponse, PresenceStatusResponse
from mentorlink.services.presence_service import PresenceService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["presence"])

UNKNOWN_USER_CLOSE_CODE = 4404


@router.get("/presence/online", response_model=OnlineUsersResponse)
async def list_online_users(
    _: User = Depends(get_current_user),
    presence: PresenceService = Depends(get_presence_service),
):
    """Ids of every user with a live realtime session."""
    return OnlineUsersResponse(user_ids=presence.list_online_users())


@router.get("/presence/{user_id}", response_model=PresenceStatusResponse)
async def get_presence(
    user_id: UUID,
    _: User = Depends(get_current_user),
    presence: PresenceService = Depends(get_presence_service),
):
    """Whether one user currently has a live realtime session."""
    return PresenceStatusResponse(user_id=user_id, online=presence.is_online(user_id))


async def _resolve_user(user_id: UUID | None) -> User | None:
    from mentorlink.infrastructure.database import db_manager

    if user_id is None:
        return None
    if not db_manager:
        logger.error("Cannot resolve WebSocket user: database not initialized")
        return None
    async with db_manager.session() as db:
        return await SqlUserDirectory(db).get_user(user_id)


@router.websocket("/ws")
async def realtime_session(
    websocket: WebSocket,
    presence: PresenceService = Depends(get_presence_service),
    channel: WebSocketPushChannel = Depends(get_push_channel),
):
    """Realtime session: receives new_message, online_users and session_superseded events."""
    await websocket.accept()
    raw_user_id = websocket.query_params.get("user_id")
    user = await _resolve_user(parse_user_id(raw_user_id))
    if user is None:
        await websocket.send_json(
            NotFoundError("User", str(raw_user_id)).to_ws_event(),
        )
        await websocket.close(code=UNKNOWN_USER_CLOSE_CODE)
        return

    token = channel.attach(websocket)
    await presence.on_user_connected(user.id, token)
    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                break
    finally:
        channel.detach(token)
        await presence.on_user_disconnected(user.id, token)
