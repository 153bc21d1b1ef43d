"""Permission catalog endpoint."""
from fastapi import APIRouter

from app.core.dependencies import CurrentUser, DbSession
from app.schemas.role import PermissionListResponse, PermissionResponse
from app.services.permissions import PermissionService


router = APIRouter()


@router.get("", response_model=PermissionListResponse)
async def list_permissions(user: CurrentUser, db: DbSession):
    """Every grantable permission, for the role editor."""
    permissions = await PermissionService.list_permissions(db)
    return PermissionListResponse(
        permissions=[PermissionResponse.model_validate(p) for p in permissions]
    )
