"""Domain error taxonomy.

Services raise these; ``app.main`` maps them onto HTTP responses. None of them
depend on FastAPI so the service layer can be driven without a request.
"""
from typing import Optional

from fastapi import status


class DomainError(Exception):
    """Base class for expected, client-facing failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> dict:
        return {"detail": self.detail}


class UnauthenticatedError(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED


class UnauthorizedError(DomainError):
    """The caller is a member but lacks the permission."""
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(DomainError):
    """Tenant-scoped lookup miss, including "member of nothing here"."""
    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(DomainError):
    """Uniqueness violation or an "already assigned" case."""
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, detail: str, field: Optional[str] = None):
        super().__init__(detail)
        self.field = field

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.field:
            data["field"] = self.field
        return data


class BusinessRuleViolation(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
