"""JWT handling for identities issued by the auth provider."""
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import jwt, JWTError
from pydantic import BaseModel, ValidationError
import uuid

from app.core.config import settings
from app.core.logging import get_logger


logger = get_logger(__name__)


class TokenPayload(BaseModel):
    """Claims this service relies on."""
    sub: str  # user_id
    email: Optional[str] = None
    type: Optional[str] = "access"
    exp: datetime
    iat: Optional[datetime] = None

    class Config:
        extra = "allow"


def create_access_token(user_id: str, email: Optional[str] = None) -> str:
    """Create a new access token.

    Tokens are normally minted by the identity provider; this exists so the
    provider and the test-suite share one claim layout.
    """
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    payload = {
        "sub": user_id,
        "email": email,
        "type": "access",
        "exp": expire,
        "iat": now,
        "jti": str(uuid.uuid4()),
    }

    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Optional[TokenPayload]:
    """Decode and validate a bearer token; None when it is unusable."""
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_aud": False},
        )
        return TokenPayload(**payload)
    except (JWTError, ValidationError) as e:
        logger.warning(f"Token decode error: {e}")
        return None
