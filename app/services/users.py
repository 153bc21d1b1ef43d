"""
services/users.py
-----------------
Read-only lookups against the identity mirror.
"""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError, ValidationError
from app.models.company import Company
from app.models.membership import Membership
from app.models.user import User


class UserService:

    @staticmethod
    async def get_user(db: AsyncSession, user_id: str) -> User | None:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def search_user(db: AsyncSession, email: str) -> User:
        """Exact, case-insensitive email match for the member picker."""
        email = (email or "").strip().lower()
        if not email:
            raise ValidationError("Email is required")

        result = await db.execute(select(User).where(func.lower(User.email) == email))
        user = result.scalars().first()
        if user is None:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    async def get_subscribed_company(db: AsyncSession, user_id: str) -> Optional[Company]:
        """
        First company, in joining order, that the user belongs to and that
        carries a subscription whose paid period is still running.
        """
        stmt = (
            select(Company)
            .join(Membership, Membership.company_id == Company.id)
            .where(
                Membership.user_id == user_id,
                Company.stripe_subscription_id.is_not(None),
            )
            .order_by(Membership.created_at)
        )
        result = await db.execute(stmt)
        for company in result.scalars().unique().all():
            if company.has_active_subscription():
                return company
        return None
