"""Role API endpoints."""
from fastapi import APIRouter, status

from app.core.dependencies import CurrentUser, DbSession
from app.schemas.common import MessageResponse
from app.schemas.role import (
    RoleCreate, RoleUpdate, RoleResponse, RoleDetailResponse,
    RoleListResponse, RoleUserResponse
)
from app.services.roles import RoleService


router = APIRouter()


@router.get("", response_model=RoleListResponse)
async def list_roles(company_id: str, user: CurrentUser, db: DbSession):
    roles = await RoleService.list_roles(db, user.id, company_id)
    return RoleListResponse(roles=[RoleResponse.model_validate(r) for r in roles])


@router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
async def create_role(
    company_id: str,
    request: RoleCreate,
    user: CurrentUser,
    db: DbSession,
):
    role = await RoleService.create_role(db, user.id, company_id, request)
    return RoleResponse.model_validate(role)


@router.get("/{role_id}", response_model=RoleDetailResponse)
async def get_role(company_id: str, role_id: str, user: CurrentUser, db: DbSession):
    """Get a role together with the users holding it."""
    role, memberships = await RoleService.get_role(db, user.id, company_id, role_id)
    users = [
        RoleUserResponse(
            id=m.user.id,
            name=m.user.name,
            email=m.user.email,
            image=m.user.image,
            joined_at=m.created_at,
        )
        for m in memberships
    ]
    return RoleDetailResponse(
        **RoleResponse.model_validate(role).model_dump(),
        users=users,
    )


@router.put("/{role_id}", response_model=RoleResponse)
async def update_role(
    company_id: str,
    role_id: str,
    request: RoleUpdate,
    user: CurrentUser,
    db: DbSession,
):
    role = await RoleService.update_role(db, user.id, company_id, role_id, request)
    return RoleResponse.model_validate(role)


@router.delete("/{role_id}", response_model=MessageResponse)
async def delete_role(company_id: str, role_id: str, user: CurrentUser, db: DbSession):
    await RoleService.delete_role(db, user.id, company_id, role_id)
    return MessageResponse(message="Role deleted successfully")
