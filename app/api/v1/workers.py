"""Worker API endpoints: farmers and farmer groups."""
from fastapi import APIRouter, status

from app.core.dependencies import CurrentUser, DbSession
from app.schemas.common import MessageResponse
from app.schemas.farmer import (
    FarmerCreate, FarmerUpdate, FarmerResponse, FarmerListResponse,
    FarmerGroupCreate, FarmerGroupUpdate, FarmerGroupResponse, FarmerGroupListResponse
)
from app.services.farmer_groups import FarmerGroupService
from app.services.farmers import FarmerService


farmers_router = APIRouter()
groups_router = APIRouter()


# Farmers

@farmers_router.get("", response_model=FarmerListResponse)
async def list_farmers(company_id: str, user: CurrentUser, db: DbSession):
    farmers = await FarmerService.list_farmers(db, user.id, company_id)
    return FarmerListResponse(farmers=[FarmerResponse.model_validate(f) for f in farmers])


@farmers_router.post("", response_model=FarmerResponse, status_code=status.HTTP_201_CREATED)
async def create_farmer(company_id: str, request: FarmerCreate, user: CurrentUser, db: DbSession):
    farmer = await FarmerService.create_farmer(db, user.id, company_id, request)
    return FarmerResponse.model_validate(farmer)


@farmers_router.get("/{farmer_id}", response_model=FarmerResponse)
async def get_farmer(company_id: str, farmer_id: str, user: CurrentUser, db: DbSession):
    farmer = await FarmerService.get_farmer(db, user.id, company_id, farmer_id)
    return FarmerResponse.model_validate(farmer)


@farmers_router.put("/{farmer_id}", response_model=FarmerResponse)
async def update_farmer(
    company_id: str,
    farmer_id: str,
    request: FarmerUpdate,
    user: CurrentUser,
    db: DbSession,
):
    farmer = await FarmerService.update_farmer(db, user.id, company_id, farmer_id, request)
    return FarmerResponse.model_validate(farmer)


@farmers_router.delete("/{farmer_id}", response_model=MessageResponse)
async def delete_farmer(company_id: str, farmer_id: str, user: CurrentUser, db: DbSession):
    await FarmerService.delete_farmer(db, user.id, company_id, farmer_id)
    return MessageResponse(message="Farmer deleted successfully")


# Farmer groups

@groups_router.get("", response_model=FarmerGroupListResponse)
async def list_farmer_groups(company_id: str, user: CurrentUser, db: DbSession):
    groups = await FarmerGroupService.list_groups(db, user.id, company_id)
    return FarmerGroupListResponse(
        farmer_groups=[FarmerGroupResponse.model_validate(g) for g in groups]
    )


@groups_router.post("", response_model=FarmerGroupResponse, status_code=status.HTTP_201_CREATED)
async def create_farmer_group(
    company_id: str,
    request: FarmerGroupCreate,
    user: CurrentUser,
    db: DbSession,
):
    group = await FarmerGroupService.create_group(db, user.id, company_id, request)
    return FarmerGroupResponse.model_validate(group)


@groups_router.get("/{group_id}", response_model=FarmerGroupResponse)
async def get_farmer_group(company_id: str, group_id: str, user: CurrentUser, db: DbSession):
    group = await FarmerGroupService.get_group(db, user.id, company_id, group_id)
    return FarmerGroupResponse.model_validate(group)


@groups_router.put("/{group_id}", response_model=FarmerGroupResponse)
async def update_farmer_group(
    company_id: str,
    group_id: str,
    request: FarmerGroupUpdate,
    user: CurrentUser,
    db: DbSession,
):
    group = await FarmerGroupService.update_group(db, user.id, company_id, group_id, request)
    return FarmerGroupResponse.model_validate(group)


@groups_router.delete("/{group_id}", response_model=MessageResponse)
async def delete_farmer_group(company_id: str, group_id: str, user: CurrentUser, db: DbSession):
    await FarmerGroupService.delete_group(db, user.id, company_id, group_id)
    return MessageResponse(message="Farmer group deleted successfully")
