from __future__ import annotations

from fastapi import APIRouter

from weekgrid.api.deps import CurrentUser
from weekgrid.schemas import UserRead

router = APIRouter()


@router.get("", response_model=UserRead, summary="Get current user")
def read_current_user(current_user: CurrentUser) -> UserRead:
    """Return the caller, creating the user record on first contact."""
    return UserRead.model_validate(current_user)
