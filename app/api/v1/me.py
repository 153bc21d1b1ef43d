"""Caller profile endpoint."""
from fastapi import APIRouter

from app.core.dependencies import CurrentUser, DbSession
from app.schemas.user import MeResponse, SubscriptionSummary, UserResponse
from app.services.users import UserService


router = APIRouter()


@router.get("", response_model=MeResponse)
async def get_me(user: CurrentUser, db: DbSession):
    """Current user plus the subscription of the first paid-up company."""
    company = await UserService.get_subscribed_company(db, user.id)
    subscription = None
    if company is not None:
        subscription = SubscriptionSummary(
            is_active=True,
            price_id=company.stripe_price_id,
            current_period_end=company.stripe_current_period_end,
        )
    return MeResponse(user=UserResponse.model_validate(user), subscription=subscription)
