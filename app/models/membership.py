"""Membership model linking users to companies through roles."""
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
import uuid

from app.core.database import Base


class Membership(Base):
    """One (user, company, role) assignment.

    A user holding several roles in a company has one row per role.
    """

    __tablename__ = "user_companies"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )
    company_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False
    )
    role_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    # Relationships
    user = relationship("User", back_populates="memberships", lazy="selectin")
    company = relationship("Company", back_populates="memberships")
    role = relationship("Role", back_populates="memberships", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("user_id", "company_id", "role_id", name="uq_membership_user_company_role"),
        Index("ix_membership_user_company", "user_id", "company_id"),
    )
