# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for upstream credentials, call tuning and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === UPSTREAM CREDENTIALS ===
    gemini_api_key: str = ""
    gemini_api_keys: str = ""
    gemini_key_batch_size: int = 3

    # === UPSTREAM CALL ===
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model: str = "gemini-2.0-flash"
    gemini_temperature: float = 0.4
    gemini_max_output_tokens: int = 4096
    gemini_top_k: int = 32
    gemini_top_p: float = 1.0

    # === Timeout / retry ===
    request_timeout_s: float = 30.0
    retry_max_attempts: int = 3
    retry_base_delay_s: float = 1.0

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("gemini_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:  # noqa: N805
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.gemini_key_batch_size < 1:
            errors.append("GEMINI_KEY_BATCH_SIZE must be >= 1")

        if self.retry_max_attempts < 1:
            errors.append("RETRY_MAX_ATTEMPTS must be >= 1")

        if self.request_timeout_s <= 0:
            errors.append("REQUEST_TIMEOUT_S must be > 0")

        if self.retry_base_delay_s < 0:
            errors.append("RETRY_BASE_DELAY_S must be >= 0")

        if not 0.0 <= self.gemini_temperature <= 2.0:
            errors.append("GEMINI_TEMPERATURE must be between 0 and 2")

        if self.gemini_max_output_tokens < 1:
            errors.append("GEMINI_MAX_OUTPUT_TOKENS must be >= 1")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def gemini_api_keys_list(self) -> list[str]:
        """Parse the credential pool.

        Entries are separated by commas or newlines; only the first
        whitespace-delimited token of each entry is kept, so trailing
        comments are ignored.
        """
        keys: list[str] = []
        for line in self.gemini_api_keys.replace(",", "\n").splitlines():
            token = line.strip()
            if token:
                keys.append(token.split()[0])
        return keys


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-call config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
