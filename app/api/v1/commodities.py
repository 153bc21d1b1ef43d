"""Commodity API endpoints."""
from fastapi import APIRouter, status

from app.core.dependencies import CurrentUser, DbSession
from app.schemas.common import MessageResponse
from app.schemas.commodity import (
    CommodityCreate, CommodityUpdate, CommodityResponse, CommodityListResponse,
    CommodityBatchBrief
)
from app.services.commodities import CommodityService


router = APIRouter()


def _response(commodity, batches=()) -> CommodityResponse:
    return CommodityResponse(
        id=commodity.id,
        name=commodity.name,
        code=commodity.code,
        created_at=commodity.created_at,
        batches=[CommodityBatchBrief.model_validate(b) for b in batches],
    )


@router.get("", response_model=CommodityListResponse)
async def list_commodities(company_id: str, user: CurrentUser, db: DbSession):
    """List all commodities with this company's batches of each."""
    rows = await CommodityService.list_commodities(db, user.id, company_id)
    return CommodityListResponse(commodities=[_response(c, b) for c, b in rows])


@router.post("", response_model=CommodityResponse, status_code=status.HTTP_201_CREATED)
async def create_commodity(
    company_id: str,
    request: CommodityCreate,
    user: CurrentUser,
    db: DbSession,
):
    commodity = await CommodityService.create_commodity(db, user.id, company_id, request)
    return _response(commodity)


@router.get("/{commodity_id}", response_model=CommodityResponse)
async def get_commodity(company_id: str, commodity_id: str, user: CurrentUser, db: DbSession):
    commodity, batches = await CommodityService.get_commodity(
        db, user.id, company_id, commodity_id
    )
    return _response(commodity, batches)


@router.put("/{commodity_id}", response_model=CommodityResponse)
async def update_commodity(
    company_id: str,
    commodity_id: str,
    request: CommodityUpdate,
    user: CurrentUser,
    db: DbSession,
):
    commodity = await CommodityService.update_commodity(
        db, user.id, company_id, commodity_id, request
    )
    return _response(commodity)


@router.delete("/{commodity_id}", response_model=MessageResponse)
async def delete_commodity(company_id: str, commodity_id: str, user: CurrentUser, db: DbSession):
    await CommodityService.delete_commodity(db, user.id, company_id, commodity_id)
    return MessageResponse(message="Commodity deleted successfully")
