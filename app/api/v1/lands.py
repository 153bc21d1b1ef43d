"""Land API endpoints."""
from fastapi import APIRouter, status

from app.core.dependencies import CurrentUser, DbSession
from app.schemas.common import MessageResponse
from app.schemas.land import LandCreate, LandUpdate, LandResponse, LandListResponse
from app.services.lands import LandService


router = APIRouter()


@router.get("", response_model=LandListResponse)
async def list_lands(company_id: str, user: CurrentUser, db: DbSession):
    lands = await LandService.list_lands(db, user.id, company_id)
    return LandListResponse(lands=[LandResponse.model_validate(land) for land in lands])


@router.post("", response_model=LandResponse, status_code=status.HTTP_201_CREATED)
async def create_land(company_id: str, request: LandCreate, user: CurrentUser, db: DbSession):
    land = await LandService.create_land(db, user.id, company_id, request)
    return LandResponse.model_validate(land)


@router.get("/{land_id}", response_model=LandResponse)
async def get_land(company_id: str, land_id: str, user: CurrentUser, db: DbSession):
    land = await LandService.get_land(db, user.id, company_id, land_id)
    return LandResponse.model_validate(land)


@router.put("/{land_id}", response_model=LandResponse)
async def update_land(
    company_id: str,
    land_id: str,
    request: LandUpdate,
    user: CurrentUser,
    db: DbSession,
):
    land = await LandService.update_land(db, user.id, company_id, land_id, request)
    return LandResponse.model_validate(land)


@router.delete("/{land_id}", response_model=MessageResponse)
async def delete_land(company_id: str, land_id: str, user: CurrentUser, db: DbSession):
    await LandService.delete_land(db, user.id, company_id, land_id)
    return MessageResponse(message="Land deleted successfully")
