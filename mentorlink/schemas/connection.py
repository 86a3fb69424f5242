"""Connection Schemas — responses for the relationship endpoints.

Invariants:
    - state serialized as the ConnectionState value (pending | accepted)
    - MentorWithStatus.status includes not_requested for mentors without a record
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from mentorlink.core.domain_types import ConnectionState, MentorStatus
from mentorlink.schemas.user import UserSummary


class ConnectionResponse(BaseModel):
    """A connection record."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    mentor_id: UUID
    mentee_id: UUID
    state: ConnectionState
    created_at: datetime
    updated_at: datetime


class ConnectionListResponse(BaseModel):
    """Accepted counterparts split by the role they play for the caller."""
    mentors: list[UserSummary]
    mentees: list[UserSummary]


class PendingRequestResponse(BaseModel):
    """A pending request as shown to the addressed mentor."""
    connection_id: UUID
    mentee: UserSummary
    created_at: datetime


class MentorWithStatus(UserSummary):
    """Mentor directory entry with the caller's connection status."""
    status: MentorStatus
