"""Tests for settings parsing."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from weekgrid.core.config import Settings


class TestAllowedUserIds:
    def test_comma_separated_string(self) -> None:
        settings = Settings(_env_file=None, ALLOWED_USER_IDS=" 1, 22 ,333,")
        assert settings.ALLOWED_USER_IDS == frozenset({1, 22, 333})

    def test_empty_means_disabled(self) -> None:
        assert Settings(_env_file=None, ALLOWED_USER_IDS="").ALLOWED_USER_IDS == frozenset()

    def test_list_input(self) -> None:
        assert Settings(_env_file=None, ALLOWED_USER_IDS=[5, "6"]).ALLOWED_USER_IDS == frozenset({5, 6})

    def test_malformed_entry_fails_fast(self) -> None:
        with pytest.raises(ValidationError, match="not an integer"):
            Settings(_env_file=None, ALLOWED_USER_IDS="1,two,3")

    def test_read_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ALLOWED_USER_IDS", "10,20")
        assert Settings(_env_file=None).ALLOWED_USER_IDS == frozenset({10, 20})

    def test_malformed_environment_value_fails_fast(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ALLOWED_USER_IDS", "10,abc")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestBotToken:
    def test_absent_token_is_dev_mode(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("BOT_TOKEN", raising=False)
        assert Settings(_env_file=None).dev_mode is True

    def test_empty_token_is_dev_mode(self) -> None:
        assert Settings(_env_file=None, BOT_TOKEN="").dev_mode is True

    def test_whitespace_token_is_still_a_token(self) -> None:
        settings = Settings(_env_file=None, BOT_TOKEN="  ")
        assert settings.dev_mode is False
        assert settings.BOT_TOKEN == "  "

    def test_token_disables_dev_mode(self) -> None:
        settings = Settings(_env_file=None, BOT_TOKEN="123:abc")
        assert settings.dev_mode is False
        assert settings.BOT_TOKEN == "123:abc"
