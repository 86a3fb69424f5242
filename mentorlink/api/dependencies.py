"""API Dependencies — wiring of stores, services and the realtime singletons.

Invariants:
    - Exactly one PresenceRegistry and one WebSocketPushChannel per process
    - Services are built per request around the request's AsyncSession
    - get_current_user is the only place identity is read from a request

Design Decisions:
    - Module-level realtime singletons: deliberate exception to the no-global-state rule
      (ADR: single-process uvicorn; multi-worker needs a shared presence store)
    - Everything exposed as a FastAPI dependency so tests override instead of patching
"""

import logging
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from mentorlink.config import get_settings
from mentorlink.core.presence_registry import PresenceRegistry
from mentorlink.infrastructure.connection_store import SqlConnectionStore
from mentorlink.infrastructure.database import get_db
from mentorlink.infrastructure.message_store import SqlMessageStore
from mentorlink.infrastructure.user_directory import SqlUserDirectory
from mentorlink.infrastructure.websocket_channel import WebSocketPushChannel
from mentorlink.models.user import User
from mentorlink.services.access_guard import AccessGuard
from mentorlink.services.connection_service import ConnectionService
from mentorlink.services.messaging_service import MessagingService
from mentorlink.services.presence_service import PresenceService
from mentorlink.services.realtime_dispatcher import RealtimeDispatcher

logger = logging.getLogger(__name__)

_presence_registry = PresenceRegistry()
_push_channel = WebSocketPushChannel()


def get_presence_registry() -> PresenceRegistry:
    return _presence_registry


def get_push_channel() -> WebSocketPushChannel:
    return _push_channel


def get_presence_service(
    registry: PresenceRegistry = Depends(get_presence_registry),
    channel: WebSocketPushChannel = Depends(get_push_channel),
) -> PresenceService:
    return PresenceService(
        registry, channel,
        broadcast_enabled=get_settings().presence_broadcast_enabled,
    )


def get_dispatcher(
    registry: PresenceRegistry = Depends(get_presence_registry),
    channel: WebSocketPushChannel = Depends(get_push_channel),
) -> RealtimeDispatcher:
    return RealtimeDispatcher(registry, channel)


def get_connection_service(
    db: AsyncSession = Depends(get_db),
) -> ConnectionService:
    return ConnectionService(SqlUserDirectory(db), SqlConnectionStore(db))


def get_messaging_service(
    db: AsyncSession = Depends(get_db),
    dispatcher: RealtimeDispatcher = Depends(get_dispatcher),
) -> MessagingService:
    return MessagingService(
        AccessGuard(SqlConnectionStore(db)), SqlMessageStore(db), dispatcher,
    )


def parse_user_id(raw: str | None) -> UUID | None:
    """UUID from an untrusted string, or None if absent/malformed."""
    if not raw:
        return None
    try:
        return UUID(raw)
    except ValueError:
        return None


async def get_current_user(
    request: Request, db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the caller from the identity header set by the auth gateway."""
    header = get_settings().identity_header
    user_id = parse_user_id(request.headers.get(header))
    if user_id is None:
        raise HTTPException(
            status.HTTP_401_UNAUTHORIZED,
            detail=f"Not authenticated: missing or invalid {header} header",
        )
    user = await SqlUserDirectory(db).get_user(user_id)
    if user is None:
        logger.warning(
            "Unknown user in identity header", extra={"user_id": str(user_id)},
        )
        raise HTTPException(
            status.HTTP_401_UNAUTHORIZED, detail="Not authenticated: user not found",
        )
    return user
