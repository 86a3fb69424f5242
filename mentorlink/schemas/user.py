"""User Schemas — public-facing user summaries for listings.

Invariants:
    - Never includes credentials or subscription data
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from mentorlink.core.domain_types import Role


class UserSummary(BaseModel):
    """Display fields for a mentor or mentee."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    full_name: str
    email: str
    profile_pic: str = ""
    role: Role
