from __future__ import annotations

from typing import List, Union

from fastapi import APIRouter, Depends, Query

from weekgrid.api.deps import CurrentIdentity, get_current_identity
from weekgrid.db import SessionDep
from weekgrid.schemas import (
    AvailabilityBatchWrite,
    AvailabilitySlotDeleted,
    AvailabilitySlotRead,
    AvailabilitySlotWithUser,
    AvailabilitySlotWrite,
)
from weekgrid.services import availability as store
from weekgrid.services.users import get_or_create_user

router = APIRouter()


@router.get(
    "",
    response_model=List[AvailabilitySlotWithUser],
    summary="List availability for a date range",
    dependencies=[Depends(get_current_identity)],
)
def list_availability(
    session: SessionDep,
    start_date: str = Query(..., alias="startDate", description="First date, YYYY-MM-DD (inclusive)"),
    end_date: str = Query(..., alias="endDate", description="Last date, YYYY-MM-DD (inclusive)"),
) -> List[AvailabilitySlotWithUser]:
    """All users' stored slots in the range. Hours without a row are red."""
    rows = store.query(session, start_date, end_date)
    return [
        AvailabilitySlotWithUser(
            id=slot.id,
            user_id=slot.user_id,
            date=slot.date,
            hour=slot.hour,
            status=slot.status,
            updated_at=slot.updated_at,
            display_name=display_name,
        )
        for slot, display_name in rows
    ]


@router.post(
    "",
    response_model=Union[AvailabilitySlotRead, AvailabilitySlotDeleted],
    summary="Save one availability slot",
)
def save_availability(
    payload: AvailabilitySlotWrite,
    session: SessionDep,
    identity: CurrentIdentity,
) -> Union[AvailabilitySlotRead, AvailabilitySlotDeleted]:
    """Set one hour for the caller. Red removes the slot."""
    # Only once the body has been accepted, so a rejected write creates no user.
    current_user = get_or_create_user(session, identity.id, identity.display_name)
    slot = store.save(session, current_user.id, payload.date, payload.hour, payload.status)
    if slot is None:
        return AvailabilitySlotDeleted(
            user_id=current_user.id,
            date=payload.date,
            hour=payload.hour,
        )
    return AvailabilitySlotRead.model_validate(slot)


@router.post(
    "/batch",
    response_model=List[AvailabilitySlotRead],
    summary="Save several availability slots",
)
def batch_save_availability(
    payload: AvailabilityBatchWrite,
    session: SessionDep,
    identity: CurrentIdentity,
) -> List[AvailabilitySlotRead]:
    """Set several hours for the caller. Red slots are removed and left out of the response."""
    current_user = get_or_create_user(session, identity.id, identity.display_name)
    saved = store.batch_save(session, current_user.id, payload.slots)
    return [AvailabilitySlotRead.model_validate(slot) for slot in saved]
