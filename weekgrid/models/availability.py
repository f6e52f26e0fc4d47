from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Optional

from sqlalchemy import BigInteger, CheckConstraint, Column, ForeignKey, Index, UniqueConstraint
from sqlmodel import Field, SQLModel

from .user import utcnow


class SlotStatus(str, Enum):
    GREEN = "green"  # free
    YELLOW = "yellow"  # tentative
    RED = "red"  # unavailable

    @property
    def persisted(self) -> bool:
        """Red is the default state and is stored as the absence of a row."""
        return self is not SlotStatus.RED

    @classmethod
    def from_row(cls, slot: Optional["AvailabilitySlot"]) -> "SlotStatus":
        if slot is None:
            return cls.RED
        return cls(slot.status)


class AvailabilitySlot(SQLModel, table=True):
    """One user's status for one hour of one calendar day."""

    __tablename__ = "availability"
    __table_args__ = (
        UniqueConstraint("user_id", "date", "hour", name="user_date_hour_unique"),
        CheckConstraint("hour >= 0 AND hour <= 23", name="hour_check"),
        CheckConstraint("status IN ('green', 'yellow', 'red')", name="status_check"),
        Index("idx_availability_user_date_hour", "user_id", "date", "hour"),
        Index("idx_availability_date", "date"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    )
    date: dt.date = Field(nullable=False)
    hour: int = Field(nullable=False)
    status: str = Field(max_length=16, nullable=False)
    updated_at: dt.datetime = Field(default_factory=utcnow, nullable=False)
