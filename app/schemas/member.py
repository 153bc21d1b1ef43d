"""Membership schemas."""
from typing import Optional, List
from pydantic import BaseModel, Field


class MemberAddRequest(BaseModel):
    """Grant one or more roles to a user."""
    user_id: str = Field(..., min_length=1)
    role_ids: List[str]


class MemberRoleUpdateRequest(BaseModel):
    """Replace one of a member's roles.

    ``from_role_id`` picks the row to replace when the member holds several.
    """
    role_id: str = Field(..., min_length=1)
    from_role_id: Optional[str] = None
