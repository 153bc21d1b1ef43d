"""Commodity schemas."""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field


class CommodityCreate(BaseModel):
    """Request to create a commodity."""
    name: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1)


class CommodityUpdate(BaseModel):
    name: Optional[str] = None
    code: Optional[str] = None


class CommodityBatchBrief(BaseModel):
    id: str
    lot_code: str
    harvest_date: datetime
    total_kg: float

    class Config:
        from_attributes = True


class CommodityResponse(BaseModel):
    """Commodity with the requesting company's batches of it."""
    id: str
    name: str
    code: str
    created_at: datetime
    batches: List[CommodityBatchBrief] = []

    class Config:
        from_attributes = True


class CommodityListResponse(BaseModel):
    commodities: List[CommodityResponse]
