"""Shared response schemas."""
from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Acknowledgement for operations that return no resource."""
    success: bool = True
    message: str
