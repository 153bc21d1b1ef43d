"""Company schemas."""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field


class CompanyCreate(BaseModel):
    """Request to create a company."""
    name: str = Field(..., min_length=1, max_length=100)
    image: Optional[str] = None


class CompanyUpdate(BaseModel):
    """Request to rename a company."""
    name: str = Field(..., min_length=1, max_length=100)


class MemberRoleBrief(BaseModel):
    id: str
    name: str


class CompanyMemberResponse(BaseModel):
    """A user together with every role they hold in the company."""
    id: str
    name: Optional[str] = None
    email: str
    image: Optional[str] = None
    roles: List[MemberRoleBrief] = []
    joined_at: datetime


class CompanyResponse(BaseModel):
    """Company as seen by one of its members."""
    id: str
    name: str
    image: Optional[str] = None
    user_id: Optional[str] = None
    stripe_price_id: Optional[str] = None
    current_period_end: Optional[datetime] = None
    has_active_subscription: bool
    is_owner: bool
    roles: List[str] = []
    permissions: List[str] = []
    members: List[CompanyMemberResponse] = []
    created_at: datetime
    updated_at: datetime

    @classmethod
    def build(cls, company, access, members=None) -> "CompanyResponse":
        """``access`` is any object with is_owner, roles and permissions."""
        return cls(
            id=company.id,
            name=company.name,
            image=company.image,
            user_id=company.user_id,
            stripe_price_id=company.stripe_price_id,
            current_period_end=company.stripe_current_period_end,
            has_active_subscription=company.has_active_subscription(),
            is_owner=access.is_owner,
            roles=access.roles,
            permissions=sorted(access.permissions),
            members=members or [],
            created_at=company.created_at,
            updated_at=company.updated_at,
        )


class CompanyListResponse(BaseModel):
    companies: List[CompanyResponse]
