"""Batch schemas."""
from datetime import datetime
from typing import Any, Optional, List
from pydantic import BaseModel, ConfigDict, Field

from app.schemas.farmer import FarmerGroupBrief


class BatchCreate(BaseModel):
    """Request to open a batch. ``total_kg`` always starts at zero."""
    model_config = ConfigDict(extra="forbid")

    commodity_id: str = Field(..., min_length=1)
    lot_code: str = Field(..., min_length=1)
    harvest_date: datetime


class BatchUpdate(BaseModel):
    """Only lot code and harvest date are writable; totals are derived."""
    model_config = ConfigDict(extra="forbid")

    lot_code: Optional[str] = Field(None, min_length=1)
    harvest_date: Optional[datetime] = None


class CommodityBrief(BaseModel):
    id: str
    name: str
    code: str

    class Config:
        from_attributes = True


class LandBrief(BaseModel):
    id: str
    name: str
    location: str
    area_hectares: float

    class Config:
        from_attributes = True


class BatchResponse(BaseModel):
    """Batch response schema."""
    id: str
    company_id: str
    commodity_id: str
    lot_code: str
    harvest_date: datetime
    total_kg: float
    created_at: datetime
    updated_at: datetime
    commodity: Optional[CommodityBrief] = None

    class Config:
        from_attributes = True


class BatchListResponse(BaseModel):
    batches: List[BatchResponse]


# Sources

class BatchSourceCreate(BaseModel):
    farmer_group_id: str = Field(..., min_length=1)
    land_id: str = Field(..., min_length=1)
    volume_kg: float = Field(..., ge=0)
    land_snapshot: Optional[dict[str, Any]] = None


class BatchSourceUpdate(BaseModel):
    farmer_group_id: Optional[str] = None
    land_id: Optional[str] = None
    volume_kg: Optional[float] = Field(None, ge=0)
    land_snapshot: Optional[dict[str, Any]] = None


class BatchSourceResponse(BaseModel):
    id: str
    batch_id: str
    farmer_group_id: str
    land_id: str
    volume_kg: float
    land_snapshot: dict[str, Any] = {}
    created_at: datetime
    farmer_group: Optional[FarmerGroupBrief] = None
    land: Optional[LandBrief] = None

    class Config:
        from_attributes = True


class BatchSourceListResponse(BaseModel):
    batch_sources: List[BatchSourceResponse]


# Attributes

class BatchAttributeCreate(BaseModel):
    key: str = Field(..., min_length=1)
    value: str = Field(..., min_length=1)
    unit: Optional[str] = None
    recorded_at: Optional[datetime] = None


class BatchAttributeUpdate(BaseModel):
    key: Optional[str] = None
    value: Optional[str] = None
    unit: Optional[str] = None
    recorded_at: Optional[datetime] = None


class BatchAttributeResponse(BaseModel):
    id: str
    batch_id: str
    key: str
    value: str
    unit: Optional[str] = None
    recorded_at: datetime

    class Config:
        from_attributes = True


class BatchAttributeListResponse(BaseModel):
    batch_attributes: List[BatchAttributeResponse]


# Lineage

class BatchRelationCreate(BaseModel):
    """Link the path batch as parent of ``child_batch_id``."""
    child_batch_id: str = Field(..., min_length=1)


class BatchRelationResponse(BaseModel):
    id: str
    parent_batch_id: str
    child_batch_id: str
    created_at: datetime

    class Config:
        from_attributes = True


class BatchDetailResponse(BatchResponse):
    """Batch with everything hanging off it."""
    sources: List[BatchSourceResponse] = []
    attributes: List[BatchAttributeResponse] = []
    parents: List[BatchRelationResponse] = []
    children: List[BatchRelationResponse] = []
