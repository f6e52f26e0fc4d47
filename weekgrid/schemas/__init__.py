from .availability import (
    AvailabilityBatchWrite,
    AvailabilitySlotDeleted,
    AvailabilitySlotRead,
    AvailabilitySlotWithUser,
    AvailabilitySlotWrite,
)
from .user import UserRead

__all__ = [
    "AvailabilityBatchWrite",
    "AvailabilitySlotDeleted",
    "AvailabilitySlotRead",
    "AvailabilitySlotWithUser",
    "AvailabilitySlotWrite",
    "UserRead",
]
