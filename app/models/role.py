"""Role model."""
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
import uuid

from app.core.database import Base
from app.core.permissions import OWNER_ROLE
from app.models.permission import role_permissions


class Role(Base):
    """A named permission set inside one company."""

    __tablename__ = "roles"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    # Always stored trimmed and lower-cased
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    company_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    # Relationships
    company = relationship("Company", back_populates="roles")
    permissions = relationship(
        "Permission",
        secondary=role_permissions,
        back_populates="roles",
        lazy="selectin",
        order_by="Permission.name",
    )
    memberships = relationship("Membership", back_populates="role")

    __table_args__ = (
        UniqueConstraint("company_id", "name", name="uq_role_company_name"),
    )

    @property
    def is_owner(self) -> bool:
        return self.name == OWNER_ROLE
