from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _as_bool(value, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if value is None or value == "":
        return default
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


class ODSettings(BaseSettings):
    """Centralized application configuration pulled from environment/.env."""

    database_url: Optional[str] = Field(None, alias="DATABASE_URL")
    jwt_secret: str = Field("dev-secret", alias="JWT_SECRET")
    # Supabase access tokens carry aud=authenticated; leave empty to skip the check
    jwt_audience: str = Field("", alias="JWT_AUDIENCE")
    trusted_email_domain: str = Field("", alias="TRUSTED_EMAIL_DOMAIN")
    auto_apply_ddl: bool = Field(True, alias="OD_AUTO_APPLY_DDL")
    enforce_alembic_migrations: bool = Field(False, alias="OD_ENFORCE_ALEMBIC")
    enforce_period_timings: bool = Field(False, alias="OD_ENFORCE_PERIOD_TIMINGS")
    review_require_pending: bool = Field(False, alias="OD_REVIEW_REQUIRE_PENDING")
    cors_origins: str = Field("", alias="API_CORS_ORIGINS")
    port: int = Field(3000, alias="PORT")
    # Build/meta info
    app_version: str = Field("dev", alias="APP_VERSION")
    git_sha: Optional[str] = Field(None, alias="GIT_SHA")
    build_ts: Optional[str] = Field(None, alias="BUILD_TS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("jwt_secret", mode="before")
    @classmethod
    def _normalize_secret(cls, value: str | None) -> str:
        val = (value or "dev-secret").strip()
        return val or "dev-secret"

    @field_validator("trusted_email_domain", mode="before")
    @classmethod
    def _normalize_domain(cls, value: str | None) -> str:
        # "@college.edu" and "college.edu" are treated alike
        return (value or "").strip().lower().lstrip("@")

    @field_validator("database_url", mode="before")
    @classmethod
    def _strip_database_url(cls, value: str | None) -> Optional[str]:
        return value.strip() if isinstance(value, str) else value

    @field_validator("auto_apply_ddl", mode="before")
    @classmethod
    def _parse_bool_default_on(cls, value) -> bool:
        return _as_bool(value, True)

    @field_validator("enforce_alembic_migrations", "enforce_period_timings", "review_require_pending", mode="before")
    @classmethod
    def _parse_bool_default_off(cls, value) -> bool:
        return _as_bool(value, False)

    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache(maxsize=1)
def get_settings() -> ODSettings:
    return ODSettings()


def reset_settings_cache() -> None:
    """Testing helper to clear cached settings."""
    get_settings.cache_clear()
