"""Farmer, farmer group and their join table."""
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
import uuid

from app.core.database import Base


class FarmerGroupFarmer(Base):
    """Membership of a farmer in a farmer group."""

    __tablename__ = "farmer_group_farmers"

    farmer_group_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("farmer_groups.id", ondelete="CASCADE"),
        primary_key=True
    )
    farmer_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("farmers.id", ondelete="CASCADE"),
        primary_key=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )


class Farmer(Base):
    """An individual grower registered by a company."""

    __tablename__ = "farmers"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    company_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    national_id: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    phone_number: Mapped[str] = mapped_column(String(50), nullable=False)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    # Written through FarmerGroupFarmer rows
    groups = relationship(
        "FarmerGroup",
        secondary="farmer_group_farmers",
        viewonly=True,
        order_by="FarmerGroup.name",
    )


class FarmerGroup(Base):
    """A cooperative or collection group of farmers."""

    __tablename__ = "farmer_groups"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    company_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    # Written through FarmerGroupFarmer rows
    farmers = relationship(
        "Farmer",
        secondary="farmer_group_farmers",
        viewonly=True,
        order_by="Farmer.last_name",
    )
