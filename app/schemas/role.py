"""Role and permission schemas."""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field


class PermissionResponse(BaseModel):
    """Catalog entry."""
    id: str
    name: str
    description: Optional[str] = None

    class Config:
        from_attributes = True


class PermissionListResponse(BaseModel):
    permissions: List[PermissionResponse]


class RoleCreate(BaseModel):
    """Request to create a role."""
    name: str = Field(..., min_length=1, max_length=50)
    permission_ids: Optional[List[str]] = None


class RoleUpdate(BaseModel):
    """Request to update a role.

    ``permission_ids`` replaces the whole permission set when present.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    permission_ids: Optional[List[str]] = None


class RoleResponse(BaseModel):
    """Role response schema."""
    id: str
    name: str
    company_id: str
    created_at: datetime
    permissions: List[PermissionResponse] = []

    class Config:
        from_attributes = True


class RoleUserResponse(BaseModel):
    """User holding a role."""
    id: str
    name: Optional[str] = None
    email: str
    image: Optional[str] = None
    joined_at: datetime


class RoleDetailResponse(RoleResponse):
    users: List[RoleUserResponse] = []


class RoleListResponse(BaseModel):
    roles: List[RoleResponse]
