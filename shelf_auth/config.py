"""
Auth Settings - Configuration consumed by the authentication core.

Loaded from SHELF_AUTH_* environment variables (and an optional .env file)
via pydantic-settings. Build one AuthSettings at process start and pass it
to the services; tests construct their own instance with explicit values.
"""

from datetime import timedelta
from typing import List

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_JWT_SECRET = "change-me-in-production"
PLACEHOLDER_PEPPER = "default-pepper-value"
PLACEHOLDER_LOOKUP_SECRET = "change-me-lookup-secret"


class AuthSettings(BaseSettings):
    """All authentication configuration. Set via SHELF_AUTH_* env vars."""

    model_config = SettingsConfigDict(
        env_prefix="SHELF_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Access tokens (stateless, signed)
    jwt_secret: str = PLACEHOLDER_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "shelf-auth"
    access_token_ttl_seconds: int = Field(default=3600, gt=0)

    # Refresh tokens (stateful, stored)
    refresh_token_ttl_days: int = Field(default=7, gt=0)
    token_lookup_secret: str = PLACEHOLDER_LOOKUP_SECRET

    # Passwords
    password_pepper: str = PLACEHOLDER_PEPPER
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    min_password_score: int = Field(default=60, ge=0, le=100)
    disposable_email_domains: List[str] = [
        "tempmail.com",
        "guerrillamail.com",
        "mailinator.com",
    ]

    # Cookies
    environment: str = "development"
    cookie_domain: str = "localhost"
    access_cookie_name: str = "access_token"
    refresh_cookie_name: str = "refresh_token"
    refresh_cookie_path: str = "/auth"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def access_token_ttl(self) -> timedelta:
        return timedelta(seconds=self.access_token_ttl_seconds)

    @property
    def refresh_token_ttl(self) -> timedelta:
        return timedelta(days=self.refresh_token_ttl_days)

    @model_validator(mode="after")
    def validate_production_secrets(self):
        """Refuse placeholder secrets outside development."""
        if self.environment == "development":
            return self

        placeholders = {
            "jwt_secret": PLACEHOLDER_JWT_SECRET,
            "password_pepper": PLACEHOLDER_PEPPER,
            "token_lookup_secret": PLACEHOLDER_LOOKUP_SECRET,
        }
        for name, placeholder in placeholders.items():
            if getattr(self, name) == placeholder:
                raise ValueError(
                    f"SHELF_AUTH_{name.upper()} must be set to a secure value in "
                    f"non-development environments. Generate one with: "
                    'python -c "import secrets; print(secrets.token_urlsafe(32))"'
                )
        return self
