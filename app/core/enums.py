"""Enum definitions for the application."""
from enum import Enum


class MemberScope(str, Enum):
    """Which permission family guards a membership operation."""
    MEMBER = "member"
    ADMIN = "admin"

    @property
    def create_permission(self) -> str:
        return f"{self.value}:user:create"

    @property
    def update_permission(self) -> str:
        return f"{self.value}:user:update"

    @property
    def delete_permission(self) -> str:
        return f"{self.value}:user:delete"
