#!/usr/bin/env python
# config.py
import os

# This assumes config.py is at the root of your project
basedir = os.path.abspath(os.path.dirname(__file__))


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


class Config:
    # Upstream photo API (jsonplaceholder-compatible)
    PHOTOS_API_BASE_URL = os.getenv('PHOTOS_API_BASE_URL', 'https://jsonplaceholder.typicode.com').rstrip('/')

    # Downloads
    BASE_OUTPUT_DIR = os.getenv('BASE_OUTPUT_DIR', 'photos')
    PHOTOS_PER_ALBUM = _get_int('PHOTOS_PER_ALBUM', 5)
    # Politeness pause after each photo and after each album
    REQUEST_DELAY_SECONDS = _get_float('REQUEST_DELAY_SECONDS', 3.0)

    # Persistent cache
    CACHE_DIR = os.getenv('CACHE_DIR', 'cache')
    CACHE_NAMESPACE = os.getenv('CACHE_NAMESPACE', 'photos')
    CACHE_TTL_SECONDS = _get_int('CACHE_TTL_SECONDS', 60 * 60 * 24 * 7)

    # HTTP / retry
    HTTP_TIMEOUT_SECONDS = _get_float('HTTP_TIMEOUT_SECONDS', 30.0)
    # Fixed: total attempts per fetch, first try included
    FETCH_MAX_ATTEMPTS = 10
    RETRY_INITIAL_DELAY_SECONDS = _get_float('RETRY_INITIAL_DELAY_SECONDS', 0.1)
    RETRY_MAX_DELAY_SECONDS = _get_float('RETRY_MAX_DELAY_SECONDS', 30.0)

    # Logging
    LOG_DIR = os.getenv('LOG_DIR', 'logs')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').strip().upper()
    ENABLE_CONSOLE_LOGS = _get_bool('ENABLE_CONSOLE_LOGS', True)
