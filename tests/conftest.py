import os
import sys

import pytest

# Ensure project root is on sys.path so 'app', 'config', and 'album_downloader' import correctly
_TESTS_DIR = os.path.dirname(__file__)
_ROOT_DIR = os.path.abspath(os.path.join(_TESTS_DIR, os.pardir))
if _ROOT_DIR not in sys.path:
    sys.path.insert(0, _ROOT_DIR)

from album_downloader.infrastructure.http_fetcher import ResilientFetcher
from album_downloader.utils.cache import FileCache

_CONFIG_ENV_VARS = (
    "PHOTOS_API_BASE_URL",
    "BASE_OUTPUT_DIR",
    "PHOTOS_PER_ALBUM",
    "REQUEST_DELAY_SECONDS",
    "CACHE_DIR",
    "CACHE_NAMESPACE",
    "CACHE_TTL_SECONDS",
    "HTTP_TIMEOUT_SECONDS",
    "RETRY_INITIAL_DELAY_SECONDS",
    "RETRY_MAX_DELAY_SECONDS",
    "LOG_DIR",
    "LOG_LEVEL",
    "ENABLE_CONSOLE_LOGS",
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep a developer's .env or shell settings out of the tests."""
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


class Clock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def cache(tmp_path, clock):
    return FileCache(base_path=str(tmp_path / "cache"), namespace="photos", clock=clock)


@pytest.fixture
def sleeps():
    """Records requested sleeps instead of sleeping."""
    return []


@pytest.fixture
def make_fetcher(sleeps):
    def _make(session, **kwargs):
        kwargs.setdefault("sleep", sleeps.append)
        return ResilientFetcher(session=session, **kwargs)
    return _make
