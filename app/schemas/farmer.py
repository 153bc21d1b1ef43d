"""Farmer and farmer group schemas."""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel


class FarmerGroupBrief(BaseModel):
    id: str
    name: str

    class Config:
        from_attributes = True


class FarmerBrief(BaseModel):
    id: str
    first_name: str
    last_name: str
    national_id: str

    class Config:
        from_attributes = True


class FarmerCreate(BaseModel):
    """Request to register a farmer."""
    first_name: str
    last_name: str
    national_id: str
    phone_number: str
    address: str
    farmer_group_ids: Optional[List[str]] = None


class FarmerUpdate(BaseModel):
    """Partial update; ``farmer_group_ids`` replaces all group links."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    national_id: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    farmer_group_ids: Optional[List[str]] = None


class FarmerResponse(BaseModel):
    id: str
    company_id: str
    first_name: str
    last_name: str
    national_id: str
    phone_number: str
    address: str
    created_at: datetime
    groups: List[FarmerGroupBrief] = []

    class Config:
        from_attributes = True


class FarmerListResponse(BaseModel):
    farmers: List[FarmerResponse]


class FarmerGroupCreate(BaseModel):
    name: str
    farmer_ids: Optional[List[str]] = None


class FarmerGroupUpdate(BaseModel):
    """Partial update; ``farmer_ids`` replaces all farmer links."""
    name: Optional[str] = None
    farmer_ids: Optional[List[str]] = None


class FarmerGroupResponse(BaseModel):
    id: str
    company_id: str
    name: str
    created_at: datetime
    farmers: List[FarmerBrief] = []

    class Config:
        from_attributes = True


class FarmerGroupListResponse(BaseModel):
    farmer_groups: List[FarmerGroupResponse]
