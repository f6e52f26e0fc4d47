"""Telegram WebApp init-data signing and verification.

The check follows the Telegram algorithm bit for bit:

1. Parse the query string and pull out ``hash``.
2. Sort the remaining ``key=value`` pairs by key and join them with ``\\n``.
3. Derive the secret key as HMAC-SHA256(key="WebAppData", msg=bot_token).
4. HMAC-SHA256 the data-check string with that key and hex-encode it.
5. Compare against ``hash`` in constant time.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Mapping
from urllib.parse import parse_qsl, urlencode

logger = logging.getLogger(__name__)

WEB_APP_DATA_KEY = b"WebAppData"
HASH_FIELD = "hash"


def parse_init_data(raw_payload: str) -> list[tuple[str, str]]:
    """Split init data into ordered ``(key, value)`` pairs, keeping blank values."""
    return parse_qsl(raw_payload, keep_blank_values=True)


def build_data_check_string(pairs: list[tuple[str, str]]) -> str:
    return "\n".join(f"{key}={value}" for key, value in sorted(pairs, key=lambda pair: pair[0]))


def derive_secret_key(bot_token: str) -> bytes:
    return hmac.new(WEB_APP_DATA_KEY, bot_token.encode("utf-8"), hashlib.sha256).digest()


def compute_hash(data_check_string: str, bot_token: str) -> str:
    return hmac.new(
        derive_secret_key(bot_token),
        data_check_string.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def verify_init_data(raw_payload: str, secret: str) -> bool:
    """Return True when ``raw_payload`` carries a valid signature for ``secret``."""
    if not raw_payload or not secret:
        return False

    pairs = parse_init_data(raw_payload)
    provided_hash = None
    remaining: list[tuple[str, str]] = []
    for key, value in pairs:
        if key == HASH_FIELD:
            if provided_hash is None:
                provided_hash = value
        else:
            remaining.append((key, value))

    if not provided_hash:
        logger.warning("Init data has no hash field")
        return False

    expected_hash = compute_hash(build_data_check_string(remaining), secret)
    is_valid = hmac.compare_digest(expected_hash.encode("utf-8"), provided_hash.encode("utf-8"))
    if not is_valid:
        logger.warning("Init data signature mismatch")
    return is_valid


def sign_init_data(fields: Mapping[str, str], secret: str) -> str:
    """Build a signed, URL-encoded init data string from ``fields``.

    Mirrors what the Telegram client sends; handy for local testing against a
    configured bot token.
    """
    pairs = [(key, value) for key, value in fields.items() if key != HASH_FIELD]
    signature = compute_hash(build_data_check_string(pairs), secret)
    return urlencode(pairs + [(HASH_FIELD, signature)])
