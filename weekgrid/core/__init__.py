from .config import settings
from .security import sign_init_data, verify_init_data

__all__ = [
    "settings",
    "sign_init_data",
    "verify_init_data",
]
