"""Configuration management for verdict."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-3-flash-preview"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="VERDICT_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Configuration
    api_key: str | None = Field(default=None, description="API key for the generation service")
    api_base: str = Field(default=DEFAULT_API_BASE, description="Base URL of the generation service")
    model: str = Field(default=DEFAULT_MODEL, description="Model name")
    temperature: float = Field(default=0.7, description="Sampling temperature for every call")
    max_output_tokens: int = Field(default=2048, description="Output token cap for dialogue turns")
    timeout_seconds: float | None = Field(default=None, description="Transport timeout, unset means none")

    # Admission control
    queue_cooldown_seconds: float = Field(default=1.0, description="Idle gap between two queued calls")
    backoff_schedule: tuple[float, ...] = Field(
        default=(5.0, 10.0, 15.0),
        description="Seconds to wait before each retry of a rate-limited call",
    )

    # Dialogue messages shown when rate limiting outlasts every retry
    opening_rate_limit_message: str = Field(
        default="API 요청 제한을 초과했습니다. 약 1분 뒤에 페이지를 새로고침 해주세요.",
    )
    reply_rate_limit_message: str = Field(
        default="API 요청 제한을 초과했습니다. 약 1분 뒤에 다시 채팅을 전송해주세요.",
    )

    # Storage
    home: Path = Field(default=Path.home() / ".verdict", description="Directory for stored verdicts")
    learning_threshold: int = Field(default=100, description="Records per case before stats reach the prompt")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")

    @field_validator("backoff_schedule")
    @classmethod
    def _non_negative_schedule(cls, value: tuple[float, ...]) -> tuple[float, ...]:
        if any(delay < 0 for delay in value):
            raise ValueError("backoff delays must be non-negative")
        return value

    @property
    def store_path(self) -> Path:
        return self.home / "verdicts.jsonl"


def load_settings(**overrides: object) -> Settings:
    """Load settings from the environment and an optional .env file.

    Args:
        overrides: Field values that take precedence over the environment

    Returns:
        Settings instance
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    return Settings(**values)
