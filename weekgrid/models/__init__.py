from .availability import AvailabilitySlot, SlotStatus
from .user import User

__all__ = [
    "AvailabilitySlot",
    "SlotStatus",
    "User",
]
