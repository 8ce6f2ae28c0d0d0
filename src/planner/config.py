"""Application configuration using environment variables."""

from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root once so that `.env` is discovered regardless of CWD
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

DEFAULT_JWT_SECRET = "planner-dev-secret"


class Settings(BaseSettings):
    """Load configuration from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default_factory=lambda: Path("data/planner.db"),
        validation_alias=AliasChoices("PLANNER_DATABASE_PATH", "database_path"),
    )

    jwt_secret: SecretStr = Field(
        default=SecretStr(DEFAULT_JWT_SECRET),
        validation_alias=AliasChoices("JWT_SECRET", "jwt_secret"),
    )
    jwt_ttl_hours: int = Field(
        default=24,
        ge=1,
        validation_alias=AliasChoices("JWT_TTL_HOURS", "jwt_ttl_hours"),
    )

    # Planning routes are public unless this is enabled
    require_auth: bool = Field(
        default=False,
        validation_alias=AliasChoices("REQUIRE_AUTH", "require_auth"),
    )

    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"],
        validation_alias=AliasChoices("CORS_ALLOW_ORIGINS", "cors_allow_origins"),
    )

    admin_username: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("ADMIN_USERNAME", "admin_username"),
    )
    admin_password: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("ADMIN_PASSWORD", "admin_password"),
    )

    host: str = Field(
        default="0.0.0.0",
        validation_alias=AliasChoices("PLANNER_HOST", "host"),
    )
    port: int = Field(
        default=5050,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("PLANNER_PORT", "port"),
    )

    @property
    def jwt_ttl(self) -> timedelta:
        return timedelta(hours=self.jwt_ttl_hours)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached `Settings` instance."""

    return Settings()  # pyright: ignore[reportCallIssue]


__all__ = ["Settings", "get_settings", "DEFAULT_JWT_SECRET"]
