"""Presence Schemas — online status responses."""

from uuid import UUID

from pydantic import BaseModel


class OnlineUsersResponse(BaseModel):
    user_ids: list[UUID]


class PresenceStatusResponse(BaseModel):
    user_id: UUID
    online: bool
