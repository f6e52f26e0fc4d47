from functools import lru_cache
from typing import Annotated, FrozenSet, List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    PROJECT_NAME: str = "Weekgrid Availability API"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "local"
    DATABASE_URL: str = "sqlite:///./weekgrid.db"
    LOG_LEVEL: str = "INFO"

    # Telegram bot token; its absence selects unverified (development) auth
    BOT_TOKEN: Optional[str] = None
    INIT_DATA_HEADER: str = "X-Telegram-Init-Data"
    ALLOWED_USER_IDS: Annotated[FrozenSet[int], NoDecode] = frozenset()

    DEV_USER_ID: int = 999999
    DEV_USER_NAME: str = "Test User"

    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = ["*"]

    @field_validator("BOT_TOKEN", mode="before")
    @classmethod
    def empty_token_is_absent(cls, value: Optional[str]) -> Optional[str]:
        # Only an unset or empty token means development mode.
        if value == "":
            return None
        return value

    @field_validator("ALLOWED_USER_IDS", mode="before")
    @classmethod
    def parse_allowed_user_ids(cls, value):
        """Accept a comma-separated string; reject entries that are not integers."""
        if value is None:
            return frozenset()
        if isinstance(value, int):
            return frozenset({value})
        if isinstance(value, str):
            entries = [item.strip() for item in value.split(",") if item.strip()]
        else:
            entries = list(value)
        ids = set()
        for entry in entries:
            try:
                ids.add(int(entry))
            except (TypeError, ValueError):
                raise ValueError(f"ALLOWED_USER_IDS entry is not an integer: {entry!r}") from None
        return frozenset(ids)

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, value: List[str] | str) -> List[str]:
        """Allow both comma-separated strings and list inputs."""
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @property
    def dev_mode(self) -> bool:
        return self.BOT_TOKEN is None


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
