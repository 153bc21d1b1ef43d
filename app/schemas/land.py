"""Land schemas."""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel


class LandCreate(BaseModel):
    """Request to register a land parcel. Ranges are checked by the service."""
    name: str
    area_hectares: float
    latitude: float
    longitude: float
    location: str
    geo_polygon: str
    is_deforestation_free: Optional[bool] = None


class LandUpdate(BaseModel):
    name: Optional[str] = None
    area_hectares: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location: Optional[str] = None
    geo_polygon: Optional[str] = None
    is_deforestation_free: Optional[bool] = None


class LandResponse(BaseModel):
    """Land response schema."""
    id: str
    company_id: str
    name: str
    area_hectares: float
    latitude: float
    longitude: float
    location: str
    geo_polygon: str
    is_deforestation_free: Optional[bool] = None
    recorded_at: datetime

    class Config:
        from_attributes = True


class LandListResponse(BaseModel):
    lands: List[LandResponse]
