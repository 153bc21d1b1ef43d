"""Batch model and its child records."""
from datetime import datetime, timezone
from sqlalchemy import (
    String, Float, DateTime, ForeignKey, JSON,
    Index, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
import uuid

from app.core.database import Base


class Batch(Base):
    """A production lot of one commodity inside one company."""

    __tablename__ = "batches"

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
    commodity_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("commodities.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    lot_code: Mapped[str] = mapped_column(String(100), nullable=False)
    harvest_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    # Sum of batch_sources.volume_kg, maintained by the batch source service
    total_kg: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
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
    commodity = relationship("Commodity", back_populates="batches", lazy="selectin")
    sources = relationship("BatchSource", back_populates="batch", order_by="BatchSource.created_at")
    attributes = relationship("BatchAttribute", back_populates="batch", order_by="BatchAttribute.recorded_at")

    __table_args__ = (
        UniqueConstraint("company_id", "lot_code", name="uq_batch_company_lot_code"),
        Index("ix_batch_company_created", "company_id", "created_at"),
    )


class BatchSource(Base):
    """Volume contributed to a batch by a farmer group from a land parcel."""

    __tablename__ = "batch_sources"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    batch_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("batches.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    farmer_group_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("farmer_groups.id", ondelete="RESTRICT"),
        nullable=False
    )
    land_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("lands.id", ondelete="RESTRICT"),
        nullable=False
    )
    volume_kg: Mapped[float] = mapped_column(Float, nullable=False)
    land_snapshot: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    # Relationships
    batch = relationship("Batch", back_populates="sources")
    farmer_group = relationship("FarmerGroup", lazy="selectin")
    land = relationship("Land", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("batch_id", "farmer_group_id", "land_id", name="uq_batch_source_combination"),
        CheckConstraint("volume_kg >= 0", name="volume_kg_non_negative"),
    )


class BatchAttribute(Base):
    """Free-form measurement recorded against a batch (moisture, grade...)."""

    __tablename__ = "batch_attributes"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    batch_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("batches.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    key: Mapped[str] = mapped_column(String(100), nullable=False)
    value: Mapped[str] = mapped_column(String(500), nullable=False)
    unit: Mapped[str] = mapped_column(String(50), nullable=True)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    # Relationships
    batch = relationship("Batch", back_populates="attributes")


class BatchRelation(Base):
    """Lineage edge: ``child_batch_id`` was produced from ``parent_batch_id``."""

    __tablename__ = "batch_relations"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    parent_batch_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("batches.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    child_batch_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("batches.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    __table_args__ = (
        UniqueConstraint("parent_batch_id", "child_batch_id", name="uq_batch_relation_pair"),
        CheckConstraint("parent_batch_id <> child_batch_id", name="batch_relation_not_self"),
    )
