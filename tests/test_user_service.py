"""Tests for the user directory."""

from __future__ import annotations

from sqlmodel import Session, func, select

from weekgrid.models import User
from weekgrid.services.users import get_or_create_user, get_user


def count_users(session: Session) -> int:
    return session.exec(select(func.count()).select_from(User)).one()


class TestGetOrCreateUser:
    def test_creates_user_on_first_call(self, session: Session) -> None:
        user = get_or_create_user(session, 42, "Amy")
        assert user.id == 42
        assert user.display_name == "Amy"
        assert user.created_at is not None
        assert count_users(session) == 1

    def test_second_call_with_same_name_returns_existing_row(self, session: Session) -> None:
        first = get_or_create_user(session, 42, "Amy")
        created_at = first.created_at
        second = get_or_create_user(session, 42, "Amy")
        assert second.id == 42
        assert second.created_at == created_at
        assert count_users(session) == 1

    def test_changed_name_is_updated_in_place(self, session: Session) -> None:
        first = get_or_create_user(session, 42, "Amy")
        created_at = first.created_at
        renamed = get_or_create_user(session, 42, "Amelia")
        assert renamed.display_name == "Amelia"
        assert renamed.created_at == created_at
        assert count_users(session) == 1
        session.expire_all()
        assert get_user(session, 42).display_name == "Amelia"

    def test_row_written_by_another_session_is_updated_not_duplicated(self, engine) -> None:
        with Session(engine) as other:
            get_or_create_user(other, 42, "Amy")
        with Session(engine) as session:
            user = get_or_create_user(session, 42, "Amy W")
            assert user.display_name == "Amy W"
            assert count_users(session) == 1

    def test_large_telegram_ids(self, session: Session) -> None:
        user = get_or_create_user(session, 7_123_456_789, "Big")
        assert get_user(session, 7_123_456_789) is user


class TestGetUser:
    def test_missing_user(self, session: Session) -> None:
        assert get_user(session, 1) is None
