"""
Notes API — Application Configuration
=======================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time.

Design Decision:
    pydantic-settings over raw os.getenv() gives automatic type coercion
    (str → int), range validation at startup and one documented place for
    every knob the service exposes.
"""

from datetime import timedelta, timezone
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for development.
    Attributes are grouped by concern for readability.
    """

    # ── Persistence ───────────────────────────────────────────────────────
    # What: Path of the JSON document holding the whole note collection
    # Created (with an empty array) on first access if missing
    data_file: str = Field(
        default="./data/notes.json",
        description="Path of the JSON file used as the note store",
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    # What: Fixed UTC offset applied to createdAt/updatedAt
    # Default +5 matches the deployment region the service was built for
    timezone_offset_hours: int = Field(default=5, ge=-12, le=14)

    @property
    def fixed_timezone(self) -> timezone:
        """Fixed-offset tzinfo built from timezone_offset_hours."""
        return timezone(timedelta(hours=self.timezone_offset_hours))

    # ── Pagination ────────────────────────────────────────────────────────
    # What: Page size used when the client omits `limit`
    default_page_limit: int = Field(default=10, ge=1, le=100)

    # ── HTTP ──────────────────────────────────────────────────────────────
    # What: Prefix the notes router is mounted under ("" → /notes)
    api_prefix: str = Field(default="")

    @field_validator("api_prefix")
    @classmethod
    def normalize_api_prefix(cls, v: str) -> str:
        """Strips trailing slashes and guarantees a leading one."""
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v

    # What: Allowed origins for cross-origin requests
    # Format: Comma-separated URLs, or "*" for any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=3000, ge=1, le=65535)

    # What: Logging verbosity
    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # DATA_FILE and data_file both work
    }


# Singleton instance — imported throughout the application
settings = Settings()
