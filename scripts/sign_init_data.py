#!/usr/bin/env python3
"""Print a signed X-Telegram-Init-Data value for calling the API locally.

Usage:
    python scripts/sign_init_data.py 42 Amy
"""

import json
import sys
import time
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BASE_DIR))

from weekgrid.core.config import settings
from weekgrid.core.security import sign_init_data


def main() -> int:
    if len(sys.argv) < 3:
        print("Usage: sign_init_data.py <telegram_user_id> <first_name>")
        return 1
    if not settings.BOT_TOKEN:
        print("BOT_TOKEN is not set; the API is in development mode and needs no signature")
        return 1

    user = {"id": int(sys.argv[1]), "first_name": sys.argv[2]}
    fields = {"auth_date": str(int(time.time())), "user": json.dumps(user)}
    print(sign_init_data(fields, settings.BOT_TOKEN))
    return 0


if __name__ == "__main__":
    sys.exit(main())
