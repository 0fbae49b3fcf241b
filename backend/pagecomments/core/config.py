"""Configuration settings using Pydantic Settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str

    environment: Literal["development", "production"] = "development"
    api_docs_enabled: bool | None = None

    # Administrative endpoints (page management)
    admin_token: str | None = None

    # CORS
    cors_allow_origins: list[str] = ["http://localhost:3000"]
    cors_allow_methods: list[str] = ["GET", "POST", "OPTIONS"]
    cors_allow_headers: list[str] = [
        "Accept",
        "Content-Type",
        "X-Request-ID",
        "X-Admin-Token",
        "X-Metrics-Token",
    ]
    cors_allow_credentials: bool = True

    # Form session cookie
    form_session_cookie_name: str = "form_session"
    form_session_cookie_path: str = "/"
    form_session_cookie_domain: str | None = None
    form_session_cookie_samesite: Literal["lax", "strict", "none"] = "lax"
    form_session_cookie_secure: bool | None = None
    form_session_ttl_hours: int = 24

    # Comment form
    comment_max_length: int = 2000
    duplicate_comment_min_length: int = 20

    # Rate limiting (production-only safeguard)
    rate_limit_comment_posts_per_minute: int = 10

    @field_validator(
        "cors_allow_origins",
        "cors_allow_methods",
        "cors_allow_headers",
        mode="before",
    )
    @classmethod
    def _parse_csv_lists(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("duplicate_comment_min_length", "form_session_ttl_hours")
    @classmethod
    def _non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must not be negative")
        return v

    @property
    def form_session_cookie_is_secure(self) -> bool:
        if self.form_session_cookie_secure is not None:
            return bool(self.form_session_cookie_secure)
        return self.environment == "production"

    @model_validator(mode="after")
    def _validate_production_settings(self) -> Settings:
        if self.environment != "production":
            return self

        if not self.admin_token or len(self.admin_token) < 32:
            raise ValueError("ADMIN_TOKEN must be a strong secret in production")

        if any(x == "*" for x in self.cors_allow_origins):
            raise ValueError("CORS_ALLOW_ORIGINS cannot contain '*' in production")
        if any(x == "*" for x in self.cors_allow_methods):
            raise ValueError("CORS_ALLOW_METHODS cannot contain '*' in production")
        if any(x == "*" for x in self.cors_allow_headers):
            raise ValueError("CORS_ALLOW_HEADERS cannot contain '*' in production")

        if self.form_session_cookie_samesite == "none" and not self.form_session_cookie_is_secure:
            raise ValueError(
                "FORM_SESSION_COOKIE_SECURE must be true when FORM_SESSION_COOKIE_SAMESITE=none"
            )

        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
