"""Company model for multi-tenancy."""
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
import uuid

from app.core.database import Base


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Company(Base):
    """Company model representing a tenant."""

    __tablename__ = "companies"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    image: Mapped[str] = mapped_column(String(500), nullable=True)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    # Billing state, written by the payment provider integration only
    stripe_subscription_id: Mapped[str] = mapped_column(String(255), nullable=True, unique=True)
    stripe_price_id: Mapped[str] = mapped_column(String(255), nullable=True)
    stripe_current_period_end: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    # Relationships
    roles = relationship("Role", back_populates="company")
    memberships = relationship("Membership", back_populates="company")

    def has_active_subscription(self, now: Optional[datetime] = None) -> bool:
        """True while the paid period has not ended."""
        if self.stripe_current_period_end is None:
            return False
        now = now or datetime.now(timezone.utc)
        return now < _as_utc(self.stripe_current_period_end)
