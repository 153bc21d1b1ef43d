"""Pydantic schemas."""
from app.schemas.common import MessageResponse
from app.schemas.user import UserResponse, UserSearchResponse
from app.schemas.role import (
    PermissionResponse, PermissionListResponse, RoleCreate, RoleUpdate,
    RoleResponse, RoleDetailResponse, RoleListResponse
)
from app.schemas.member import MemberAddRequest, MemberRoleUpdateRequest
from app.schemas.company import (
    CompanyCreate, CompanyUpdate, CompanyResponse, CompanyListResponse
)
from app.schemas.commodity import (
    CommodityCreate, CommodityUpdate, CommodityResponse, CommodityListResponse
)
from app.schemas.land import LandCreate, LandUpdate, LandResponse, LandListResponse
from app.schemas.farmer import (
    FarmerCreate, FarmerUpdate, FarmerResponse, FarmerListResponse,
    FarmerGroupCreate, FarmerGroupUpdate, FarmerGroupResponse, FarmerGroupListResponse
)
from app.schemas.batch import (
    BatchCreate, BatchUpdate, BatchResponse, BatchDetailResponse, BatchListResponse,
    BatchSourceCreate, BatchSourceUpdate, BatchSourceResponse, BatchSourceListResponse,
    BatchAttributeCreate, BatchAttributeUpdate, BatchAttributeResponse,
    BatchAttributeListResponse, BatchRelationCreate, BatchRelationResponse
)

__all__ = [
    "MessageResponse", "UserResponse", "UserSearchResponse",
    "PermissionResponse", "PermissionListResponse", "RoleCreate", "RoleUpdate",
    "RoleResponse", "RoleDetailResponse", "RoleListResponse",
    "MemberAddRequest", "MemberRoleUpdateRequest",
    "CompanyCreate", "CompanyUpdate", "CompanyResponse", "CompanyListResponse",
    "CommodityCreate", "CommodityUpdate", "CommodityResponse", "CommodityListResponse",
    "LandCreate", "LandUpdate", "LandResponse", "LandListResponse",
    "FarmerCreate", "FarmerUpdate", "FarmerResponse", "FarmerListResponse",
    "FarmerGroupCreate", "FarmerGroupUpdate", "FarmerGroupResponse", "FarmerGroupListResponse",
    "BatchCreate", "BatchUpdate", "BatchResponse", "BatchDetailResponse", "BatchListResponse",
    "BatchSourceCreate", "BatchSourceUpdate", "BatchSourceResponse", "BatchSourceListResponse",
    "BatchAttributeCreate", "BatchAttributeUpdate", "BatchAttributeResponse",
    "BatchAttributeListResponse", "BatchRelationCreate", "BatchRelationResponse",
]
