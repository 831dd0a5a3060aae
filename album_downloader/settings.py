#!/usr/bin/env python
"""
Centralized settings schema for the album downloader.

Merges defaults from config.Config with optional runtime overrides (for
example command-line flags) and validates the result.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config import Config


class AppSettings(BaseModel):
    """Run-wide settings consumed by the cache, fetcher and orchestrator."""

    model_config = ConfigDict(extra="ignore")

    # Upstream API
    api_base_url: str

    # Output
    base_output_dir: str
    photos_per_album: int = Field(default=5, gt=0)
    request_delay_seconds: float = Field(default=3.0, ge=0)

    # Cache
    cache_dir: str
    cache_namespace: str = Field(default="photos", min_length=1)
    cache_ttl_seconds: int = Field(default=60 * 60 * 24 * 7, gt=0)

    # HTTP / retry
    http_timeout_seconds: float = Field(default=30.0, gt=0)
    fetch_max_attempts: int = Field(default=10, gt=0)
    retry_initial_delay_seconds: float = Field(default=0.1, ge=0)
    retry_max_delay_seconds: float = Field(default=30.0, ge=0)

    # Logging
    log_dir: str = "logs"
    log_level: str = "INFO"
    enable_console_logs: bool = True

    @field_validator("api_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("api_base_url must not be empty")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> str:
        level = str(value or "INFO").strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            return "INFO"
        return level


def load_app_settings(overrides: Optional[Dict[str, Any]] = None) -> AppSettings:
    """Load settings merging config defaults with optional runtime overrides.

    Overrides whose value is ``None`` are ignored so unset CLI flags fall back
    to the configured defaults.
    """
    data: Dict[str, Any] = {
        "api_base_url": Config.PHOTOS_API_BASE_URL,
        "base_output_dir": Config.BASE_OUTPUT_DIR,
        "photos_per_album": Config.PHOTOS_PER_ALBUM,
        "request_delay_seconds": Config.REQUEST_DELAY_SECONDS,
        "cache_dir": Config.CACHE_DIR,
        "cache_namespace": Config.CACHE_NAMESPACE,
        "cache_ttl_seconds": Config.CACHE_TTL_SECONDS,
        "http_timeout_seconds": Config.HTTP_TIMEOUT_SECONDS,
        "fetch_max_attempts": Config.FETCH_MAX_ATTEMPTS,
        "retry_initial_delay_seconds": Config.RETRY_INITIAL_DELAY_SECONDS,
        "retry_max_delay_seconds": Config.RETRY_MAX_DELAY_SECONDS,
        "log_dir": Config.LOG_DIR,
        "log_level": Config.LOG_LEVEL,
        "enable_console_logs": Config.ENABLE_CONSOLE_LOGS,
    }
    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return AppSettings.model_validate(data)


__all__ = ["AppSettings", "load_app_settings"]
