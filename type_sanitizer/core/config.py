"""
Sanitizer configuration from environment variables.
Value-safe: no input data is ever part of the settings.
"""
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Sanitizer settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TYPE_SANITIZER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Runtime environment
    service_env: Literal["dev", "staging", "prod"] = Field(
        default="dev",
        description="Runtime environment ('dev' enables debug logging)"
    )

    # Failure policy used when a caller does not pass one explicitly
    default_failure_policy: Literal["fail_hard", "null_on_failure"] = Field(
        default="fail_hard",
        description=(
            "Default failure policy: "
            "'fail_hard' = raise InvalidFieldError on the first null field, "
            "'null_on_failure' = return null fields to the caller"
        )
    )

    # Input limits
    max_json_bytes: int = Field(
        default=1_048_576,
        ge=1,
        description="Maximum size of JSON text accepted by sanitize()"
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
