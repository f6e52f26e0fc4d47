from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import Field, StrictInt, StrictStr, field_validator

from weekgrid.models import SlotStatus
from weekgrid.services.availability import DATE_PATTERN

from .base import CamelModel


class AvailabilitySlotWrite(CamelModel):
    """One hour to set for the current user."""
    date: StrictStr = Field(..., description="Calendar date in YYYY-MM-DD format")
    hour: StrictInt = Field(..., ge=0, le=23, description="Hour of the day, 0-23")
    status: SlotStatus = Field(..., description="green, yellow or red")

    @field_validator("date")
    @classmethod
    def check_calendar_date(cls, value: str) -> str:
        if not DATE_PATTERN.match(value):
            raise ValueError("Date must be a calendar date in YYYY-MM-DD format")
        dt.date.fromisoformat(value)
        return value


class AvailabilityBatchWrite(CamelModel):
    """Several hours to set for the current user."""
    slots: list[AvailabilitySlotWrite] = Field(..., min_length=1, description="Slots to save; must not be empty")


class AvailabilitySlotRead(CamelModel):
    """Schema for reading a stored availability slot."""
    id: int
    user_id: int
    date: dt.date
    hour: int
    status: SlotStatus
    updated_at: dt.datetime


class AvailabilitySlotDeleted(CamelModel):
    """Returned when a slot is set to red, which removes its row."""
    user_id: int
    date: dt.date
    hour: int
    status: Literal["red"] = "red"
    deleted: Literal[True] = True


class AvailabilitySlotWithUser(AvailabilitySlotRead):
    """Availability slot with its owner's display name."""
    display_name: str
