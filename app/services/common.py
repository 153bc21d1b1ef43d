"""Small field checks shared by the resource services."""
from typing import Optional

from app.core.errors import ValidationError


def require_text(value: Optional[str], label: str) -> str:
    """Trimmed value of a required text field."""
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{label} is required")
    return value


def updated_text(value: str, label: str) -> str:
    """Trimmed value of a text field present in a partial update."""
    value = value.strip()
    if not value:
        raise ValidationError(f"{label} cannot be empty")
    return value
