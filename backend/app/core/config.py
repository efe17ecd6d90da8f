# backend/app/core/config.py
import logging
import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, SecretStr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.info(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


class Settings(BaseSettings):
    """Runtime configuration for the scheduling backend."""

    environment: str = Field(default="development", description="Deployment environment name")
    log_level: str = Field(default="INFO", description="Root log level")

    # Database
    database_url: str = Field(
        default="sqlite:///./skillswap.db",
        description="Primary database URL",
    )
    test_database_url: str = Field(
        default="sqlite:///./skillswap_test.db",
        description="Database URL used when is_testing is set",
    )
    is_testing: bool = Field(default=False, description="Route all traffic to the test database")

    # Identity provider tokens
    jwt_secret: SecretStr = Field(
        default=SecretStr("change-me-in-production"),
        validation_alias="JWT_SECRET",
        description="Secret used to sign and verify access tokens",
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    access_token_expire_minutes: int = Field(default=60 * 24, ge=1)

    # Scheduling locks
    redis_url: str = Field(default="redis://localhost:6379/0", description="Redis for distributed locks")
    scheduling_lock_backend: Literal["local", "redis"] = Field(
        default="local",
        description="'local' uses in-process participant locks only; 'redis' adds a distributed lock",
    )
    scheduling_lock_namespace: str = Field(default="skillswap", description="Redis key namespace")
    scheduling_lock_ttl_seconds: int = Field(default=30, ge=1)
    scheduling_lock_timeout_seconds: float = Field(default=5.0, gt=0)

    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    # Use ConfigDict instead of Config class (Pydantic V2 style)
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("test_database_url")
    @classmethod
    def validate_test_database(cls, v: str, info: ValidationInfo) -> str:
        """Refuse to run tests against the primary database."""
        primary = info.data.get("database_url")
        if primary and v == primary:
            raise ValueError("test_database_url must differ from database_url")
        return v

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        normalized = (v or "INFO").strip().upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {v}")
        return normalized

    def get_database_url(self) -> str:
        """Return the database URL for the current mode (test or primary)."""
        if self.is_testing or is_running_tests():
            return self.test_database_url
        return self.database_url


settings = Settings()
