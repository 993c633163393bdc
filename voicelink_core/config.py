"""
Configuration for the voice provider integration layer.

Settings are loaded from the OS environment and ``.env`` with the
``VOICELINK_`` prefix. Vendor API keys are deliberately absent: they belong
to agencies, are supplied per call and are never read from the environment.
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .transport.retry import RetryPolicy


class ProviderSettings(BaseSettings):
    """Base URLs, timeouts and retry behaviour shared by all vendor clients."""

    model_config = SettingsConfigDict(
        env_prefix="VOICELINK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Vendor endpoints
    retell_base_url: str = "https://api.retellai.com"
    vapi_base_url: str = "https://api.vapi.ai"
    bland_base_url: str = "https://api.bland.ai/v1"

    # Transport
    request_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout applied to each individual attempt",
    )
    max_retries: int = Field(
        default=3,
        description="Retries after the first attempt (attempts = max_retries + 1)",
    )
    retry_base_delay_seconds: float = 0.2
    retry_max_delay_seconds: float = 5.0
    retry_jitter: float = 0.1
    retryable_status_codes: List[int] = Field(
        default_factory=lambda: [429, 500, 502, 503, 504],
    )

    # Logging
    log_level: str = "info"
    log_json: bool = True

    @field_validator("request_timeout_seconds", "retry_base_delay_seconds", "retry_max_delay_seconds")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be greater than zero")
        return v

    @field_validator("max_retries")
    @classmethod
    def validate_max_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_retries cannot be negative")
        return v

    @field_validator("retry_jitter")
    @classmethod
    def validate_jitter(cls, v: float) -> float:
        if not 0 <= v < 1 / 3:
            raise ValueError("retry_jitter must be in [0, 1/3) to keep backoff increasing")
        return v

    @field_validator("retell_base_url", "vapi_base_url", "bland_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    def retry_policy(self) -> RetryPolicy:
        """Build the transport retry policy from these settings."""
        return RetryPolicy(
            max_retries=self.max_retries,
            base_delay_seconds=self.retry_base_delay_seconds,
            max_delay_seconds=self.retry_max_delay_seconds,
            jitter=self.retry_jitter,
            retryable_status_codes=list(self.retryable_status_codes),
        )


@lru_cache
def get_settings() -> ProviderSettings:
    """Get cached settings instance."""
    return ProviderSettings()
