"""Company API endpoints."""
from fastapi import APIRouter, status

from app.core.dependencies import CurrentUser, DbSession
from app.schemas.common import MessageResponse
from app.schemas.company import (
    CompanyCreate, CompanyUpdate, CompanyResponse, CompanyListResponse,
    CompanyMemberResponse
)
from app.services.companies import CompanyService


router = APIRouter()


def _detail(company, access, members) -> CompanyResponse:
    return CompanyResponse.build(
        company, access, [CompanyMemberResponse(**m) for m in members]
    )


@router.get("", response_model=CompanyListResponse)
async def list_companies(user: CurrentUser, db: DbSession):
    """List every company the current user belongs to."""
    companies = await CompanyService.list_companies(db, user.id)
    return CompanyListResponse(
        companies=[CompanyResponse.build(c, access) for c, access in companies]
    )


@router.post("", response_model=CompanyResponse, status_code=status.HTTP_201_CREATED)
async def create_company(request: CompanyCreate, user: CurrentUser, db: DbSession):
    """Create a company owned by the current user."""
    company, access = await CompanyService.create_company(
        db, user.id, request.name, request.image
    )
    return CompanyResponse.build(company, access)


@router.get("/name/{name}", response_model=CompanyResponse)
async def get_company_by_name(name: str, user: CurrentUser, db: DbSession):
    company, access, members = await CompanyService.get_company_by_name(db, user.id, name)
    return _detail(company, access, members)


@router.get("/{company_id}", response_model=CompanyResponse)
async def get_company(company_id: str, user: CurrentUser, db: DbSession):
    """Get a company with the caller's roles and permissions."""
    company, access, members = await CompanyService.get_company(db, user.id, company_id)
    return _detail(company, access, members)


@router.put("/{company_id}", response_model=CompanyResponse)
async def update_company(
    company_id: str,
    request: CompanyUpdate,
    user: CurrentUser,
    db: DbSession,
):
    company, access = await CompanyService.update_company(db, user.id, company_id, request.name)
    return CompanyResponse.build(company, access)


@router.delete("/{company_id}", response_model=MessageResponse)
async def delete_company(company_id: str, user: CurrentUser, db: DbSession):
    """Delete a company and everything it owns."""
    await CompanyService.delete_company(db, user.id, company_id)
    return MessageResponse(message="Company deleted successfully")
