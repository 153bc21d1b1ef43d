"""User lookup endpoints."""
from fastapi import APIRouter, Query

from app.core.dependencies import CurrentUser, DbSession
from app.schemas.user import UserResponse, UserSearchResponse
from app.services.users import UserService


router = APIRouter()


@router.get("/search", response_model=UserSearchResponse)
async def search_user(
    user: CurrentUser,
    db: DbSession,
    email: str = Query(""),
):
    """Find a user by exact email to add them to a company."""
    found = await UserService.search_user(db, email)
    return UserSearchResponse(user=UserResponse.model_validate(found))
