"""Membership API endpoints.

The same handlers are mounted twice: under ``/members`` guarded by the
``member:user:*`` permissions and under ``/admins`` guarded by
``admin:user:*``.
"""
from fastapi import APIRouter, status

from app.core.dependencies import CurrentUser, DbSession
from app.core.enums import MemberScope
from app.schemas.common import MessageResponse
from app.schemas.member import MemberAddRequest, MemberRoleUpdateRequest
from app.services.members import MemberService


def build_router(scope: MemberScope) -> APIRouter:
    router = APIRouter()
    label = scope.value.capitalize()

    @router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
    async def add_member(
        company_id: str,
        request: MemberAddRequest,
        user: CurrentUser,
        db: DbSession,
    ):
        await MemberService.add_members(
            db, user.id, company_id, request.user_id, request.role_ids, scope
        )
        return MessageResponse(message=f"{label} added successfully")

    @router.put("/{user_id}", response_model=MessageResponse)
    async def update_member_role(
        company_id: str,
        user_id: str,
        request: MemberRoleUpdateRequest,
        user: CurrentUser,
        db: DbSession,
    ):
        await MemberService.update_member_role(
            db, user.id, company_id, user_id, request.role_id, request.from_role_id, scope
        )
        return MessageResponse(message=f"{label} role updated successfully")

    @router.delete("/{user_id}", response_model=MessageResponse)
    async def remove_member(
        company_id: str,
        user_id: str,
        user: CurrentUser,
        db: DbSession,
    ):
        await MemberService.remove_member(db, user.id, company_id, user_id, scope)
        return MessageResponse(message=f"{label} removed successfully")

    return router


members_router = build_router(MemberScope.MEMBER)
admins_router = build_router(MemberScope.ADMIN)
