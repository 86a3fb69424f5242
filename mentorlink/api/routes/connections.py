"""Connection Routes — the mentor/mentee relationship lifecycle over REST.

Invariants:
    - The caller is always the actor (identity from get_current_user); path ids name
      the counterpart
    - Routes contain no state logic — ConnectionService and core guards decide
    - Domain errors propagate to the global MentorLinkError handler

Design Decisions:
    - DELETE /{user_id} for remove: either party calls it with the other's id
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from mentorlink.api.dependencies import get_connection_service, get_current_user
from mentorlink.models.user import User
from mentorlink.schemas.connection import (
    ConnectionListResponse,
    ConnectionResponse,
    MentorWithStatus,
    PendingRequestResponse,
)
from mentorlink.schemas.user import UserSummary
from mentorlink.services.connection_service import ConnectionService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/connections", tags=["connections"])


@router.post(
    "/request/{mentor_id}", response_model=ConnectionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def request_connection(
    mentor_id: UUID,
    user: User = Depends(get_current_user),
    service: ConnectionService = Depends(get_connection_service),
):
    """Mentee sends a connection request to a mentor."""
    return await service.request_connection(user.id, mentor_id)


@router.post("/accept/{mentee_id}", response_model=ConnectionResponse)
async def accept_connection(
    mentee_id: UUID,
    user: User = Depends(get_current_user),
    service: ConnectionService = Depends(get_connection_service),
):
    """Mentor accepts a mentee's pending request."""
    return await service.accept_connection(user.id, mentee_id)


@router.post("/reject/{mentee_id}")
async def reject_connection(
    mentee_id: UUID,
    user: User = Depends(get_current_user),
    service: ConnectionService = Depends(get_connection_service),
):
    """Mentor rejects a mentee's pending request (the record is deleted)."""
    await service.reject_connection(user.id, mentee_id)
    return {"message": "Request rejected"}


@router.delete("/{user_id}")
async def remove_connection(
    user_id: UUID,
    user: User = Depends(get_current_user),
    service: ConnectionService = Depends(get_connection_service),
):
    """Either party removes an accepted connection."""
    await service.remove_connection(user.id, user_id)
    return {"message": "Connection removed"}


@router.get("", response_model=ConnectionListResponse)
async def list_connections(
    user: User = Depends(get_current_user),
    service: ConnectionService = Depends(get_connection_service),
):
    """Accepted connections, split into the caller's mentors and mentees."""
    grouped = await service.list_connections(user.id)
    return ConnectionListResponse(
        mentors=[UserSummary.model_validate(u) for u in grouped["mentors"]],
        mentees=[UserSummary.model_validate(u) for u in grouped["mentees"]],
    )


@router.get("/pending", response_model=list[PendingRequestResponse])
async def list_pending_requests(
    user: User = Depends(get_current_user),
    service: ConnectionService = Depends(get_connection_service),
):
    """Pending requests addressed to the calling mentor."""
    pending = await service.list_pending_requests(user.id)
    return [
        PendingRequestResponse(
            connection_id=p.connection.id,
            mentee=UserSummary.model_validate(p.mentee),
            created_at=p.connection.created_at,
        )
        for p in pending
    ]


@router.get("/mentors", response_model=list[MentorWithStatus])
async def list_mentors(
    user: User = Depends(get_current_user),
    service: ConnectionService = Depends(get_connection_service),
):
    """Mentor directory for the calling mentee, with per-mentor request status."""
    listings = await service.list_mentors_with_status(user.id)
    return [
        MentorWithStatus(
            **UserSummary.model_validate(entry.mentor).model_dump(),
            status=entry.status,
        )
        for entry in listings
    ]
