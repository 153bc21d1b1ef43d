"""Application dependencies for dependency injection."""
from typing import Annotated, Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core.database import get_db
from app.core.errors import UnauthenticatedError
from app.core.security import decode_token, TokenPayload
from app.core.logging import get_logger
from app.models.user import User


security = HTTPBearer(auto_error=False)
logger = get_logger(__name__)


async def get_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenPayload:
    """Validate and decode the JWT token from the Authorization header."""
    if credentials is None:
        raise UnauthenticatedError("Unauthorized")

    payload = decode_token(credentials.credentials)

    if payload is None:
        raise UnauthenticatedError("Invalid or expired token")

    if payload.type != "access":
        raise UnauthenticatedError("Invalid token type. Access token required.")

    return payload


async def get_current_user(
    token: TokenPayload = Depends(get_current_token),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the token subject to a stored user."""
    result = await db.execute(
        select(User).where(User.id == token.sub)
    )
    user = result.scalar_one_or_none()

    if user is None:
        logger.warning(f"User from valid token not found: {token.sub}")
        raise UnauthenticatedError("Unauthorized")

    return user


# Type aliases for cleaner dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
