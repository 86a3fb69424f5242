"""Message Schemas — request validation and wire format for chat messages.

Invariants:
    - MessageCreate: body <= 5000 chars, attachment <= 2048 chars; emptiness is
      checked in core/access_rules.py so every entry point shares one rule
    - message_payload() is the single serialization used by REST and realtime pushes
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from mentorlink.core.repository_protocols import MessageLike

MAX_BODY_LENGTH = 5000
MAX_ATTACHMENT_LENGTH = 2048


class MessageCreate(BaseModel):
    """Send-message request body."""
    body: str | None = Field(None, max_length=MAX_BODY_LENGTH)
    attachment: str | None = Field(None, max_length=MAX_ATTACHMENT_LENGTH)


class MessageResponse(BaseModel):
    """A persisted message."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    sender_id: UUID
    recipient_id: UUID
    body: str | None
    attachment: str | None
    connection_id: UUID | None
    created_at: datetime


def message_payload(message: MessageLike) -> dict:
    """JSON-ready dict for a message (UUIDs and datetimes as strings)."""
    return MessageResponse.model_validate(message).model_dump(mode="json")
