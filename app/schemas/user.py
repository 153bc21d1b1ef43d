"""User schemas."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class UserResponse(BaseModel):
    """Public user profile."""
    id: str
    name: Optional[str] = None
    email: str
    image: Optional[str] = None

    class Config:
        from_attributes = True


class UserSearchResponse(BaseModel):
    user: UserResponse


class SubscriptionSummary(BaseModel):
    """Billing state derived from the caller's subscribed company."""
    is_active: bool
    price_id: Optional[str] = None
    current_period_end: Optional[datetime] = None


class MeResponse(BaseModel):
    user: UserResponse
    subscription: Optional[SubscriptionSummary] = None
