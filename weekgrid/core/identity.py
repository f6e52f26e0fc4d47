from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Optional

from weekgrid.core.security import parse_init_data

logger = logging.getLogger(__name__)

USER_FIELD = "user"
FALLBACK_DISPLAY_NAME = "User"

# users.id is a signed 64-bit column
MIN_USER_ID = -(2**63)
MAX_USER_ID = 2**63 - 1


@dataclass(frozen=True)
class Identity:
    """Telegram user as carried in the init data ``user`` field."""

    id: int
    display_name: str


def extract_identity(raw_payload: str) -> Optional[Identity]:
    """Decode the ``user`` field of init data.

    Returns None when the field is missing or malformed. The content is only
    trustworthy once the payload signature has been verified.
    """
    user_json = None
    for key, value in parse_init_data(raw_payload or ""):
        if key == USER_FIELD:
            user_json = value
            break
    if not user_json:
        return None

    try:
        user_data = json.loads(user_json)
    except ValueError:
        logger.warning("Init data user field is not valid JSON")
        return None

    if not isinstance(user_data, dict):
        return None
    user_id = user_data.get("id")
    # bool is an int subclass
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        return None
    if not MIN_USER_ID <= user_id <= MAX_USER_ID:
        logger.warning("Init data user id is out of range")
        return None

    display_name = user_data.get("first_name") or user_data.get("username") or FALLBACK_DISPLAY_NAME
    return Identity(id=user_id, display_name=str(display_name))
