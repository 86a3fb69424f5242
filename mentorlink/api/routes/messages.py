"""Message Routes — conversation list, history fetch and send.

Invariants:
    - Every route passes through the access guard (via MessagingService or
      ConnectionService.list_accepted_counterparts)
    - Unauthorized is uniform: a pending request looks exactly like no relationship
    - Send returns 201 with the persisted message; realtime push is a side effect

Design Decisions:
    - /conversations registered before /{counterpart_id} so the literal path wins
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from mentorlink.api.dependencies import (
    get_connection_service, get_current_user, get_messaging_service,
)
from mentorlink.models.user import User
from mentorlink.schemas.message import MessageCreate, MessageResponse
from mentorlink.schemas.user import UserSummary
from mentorlink.services.connection_service import ConnectionService
from mentorlink.services.messaging_service import MessagingService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/messages", tags=["messages"])


@router.get("/conversations", response_model=list[UserSummary])
async def list_conversations(
    user: User = Depends(get_current_user),
    service: ConnectionService = Depends(get_connection_service),
):
    """Users the caller can currently chat with."""
    return await service.list_accepted_counterparts(user.id)


@router.get("/{counterpart_id}", response_model=list[MessageResponse])
async def fetch_messages(
    counterpart_id: UUID,
    user: User = Depends(get_current_user),
    service: MessagingService = Depends(get_messaging_service),
):
    """Full message history with a connected counterpart, oldest first."""
    return await service.fetch_messages(user.id, counterpart_id)


@router.post(
    "/{counterpart_id}", response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_message(
    counterpart_id: UUID,
    body: MessageCreate,
    user: User = Depends(get_current_user),
    service: MessagingService = Depends(get_messaging_service),
):
    """Send a message to a connected counterpart."""
    return await service.send_message(
        user.id, counterpart_id, body=body.body, attachment=body.attachment,
    )
