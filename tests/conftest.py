"""
Shared pytest fixtures.

Every test gets a fresh in-memory SQLite database. API tests build the app
through ``create_application`` with explicit settings and point the session
dependency at that database.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Generator
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session

from weekgrid.core.config import Settings
from weekgrid.core.security import sign_init_data
from weekgrid.db import build_engine, get_session, init_db
from weekgrid.main import create_application

BOT_TOKEN = "abc"
INIT_DATA_HEADER = "X-Telegram-Init-Data"


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    test_engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Generator[Session, None, None]:
    with Session(engine) as db_session:
        yield db_session


def make_settings(bot_token: Optional[str] = BOT_TOKEN, allowed_user_ids: str = "") -> Settings:
    return Settings(
        _env_file=None,
        BOT_TOKEN=bot_token,
        ALLOWED_USER_IDS=allowed_user_ids,
        DATABASE_URL="sqlite://",
        INIT_DATA_HEADER=INIT_DATA_HEADER,
    )


@pytest.fixture
def make_client(engine: Engine) -> Callable[..., TestClient]:
    """Factory for a TestClient bound to the test database."""

    def _make_client(bot_token: Optional[str] = BOT_TOKEN, allowed_user_ids: str = "") -> TestClient:
        app = create_application(make_settings(bot_token, allowed_user_ids), create_tables=False)

        def override_get_session() -> Generator[Session, None, None]:
            with Session(engine) as db_session:
                yield db_session

        app.dependency_overrides[get_session] = override_get_session
        return TestClient(app)

    return _make_client


@pytest.fixture
def client(make_client: Callable[..., TestClient]) -> TestClient:
    """Client for an app that verifies init data signed with ``BOT_TOKEN``."""
    return make_client()


def init_data_for(user: dict, secret: str = BOT_TOKEN, **extra: str) -> str:
    fields = {"auth_date": "1700000000", "query_id": "AAHdF6IQAAAAAN0XohDhrOrc"}
    fields.update(extra)
    fields["user"] = json.dumps(user)
    return sign_init_data(fields, secret)


def auth_headers(user_id: int = 42, first_name: str = "Amy", secret: str = BOT_TOKEN) -> dict[str, str]:
    return {INIT_DATA_HEADER: init_data_for({"id": user_id, "first_name": first_name}, secret)}
