"""
BrettAppsCode Backend - Application Configuration
===================================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time.

Upstream AI endpoints and their default models are deliberately NOT here:
they are fixed per provider (see app.services.providers).
"""

from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have working defaults for local development.
    Attributes are grouped by concern.
    """

    # ── File Storage ──────────────────────────────────────────────────────
    # What: The single flat directory served by /api/upload, /api/read, ...
    # Created lazily on the first write or upload, never at startup.
    storage_root: str = Field(default="./uploads")

    # What: Largest accepted multipart upload, in bytes (default 50MB)
    max_upload_size: int = Field(default=52_428_800, ge=1_048_576, le=524_288_000)

    # ── Static Front End ──────────────────────────────────────────────────
    # What: Directory holding the editor bundle (index.html, app.js, ...)
    # Mounted at "/" only if it exists.
    public_dir: str = Field(default="./public")

    # ── AI Gateway ────────────────────────────────────────────────────────
    # What: Total timeout (seconds) for one upstream chat-completion call
    # The gateway never retries, so this bounds the worst-case request time.
    upstream_timeout: float = Field(default=30.0, ge=1.0, le=300.0)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs, or "*" for any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=3000, ge=1, le=65535)

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

    @property
    def public_path(self) -> Path:
        return Path(self.public_dir).resolve()

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # STORAGE_ROOT and storage_root both work
        "extra": "ignore",
    }


# Singleton instance, imported throughout the application
settings = Settings()
