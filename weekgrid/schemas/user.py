from __future__ import annotations

from datetime import datetime

from .base import CamelModel


class UserRead(CamelModel):
    """Schema for reading the current user."""
    id: int
    display_name: str
    created_at: datetime
