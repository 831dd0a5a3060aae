"""HTTP GET with bounded retry and exponential backoff."""

from __future__ import annotations

import enum
import logging
import time
from typing import Any, Callable, Optional

import requests
from tenacity import RetryCallState, Retrying, retry_if_exception, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 10

# Statuses that usually clear up on their own
_TRANSIENT_STATUSES = frozenset({408, 425, 429})


class ErrorKind(str, enum.Enum):
    TRANSIENT = "transient"
    TERMINAL = "terminal"


def classify_error(exc: BaseException) -> ErrorKind:
    """Classify a transport failure as transient or terminal.

    Used for reporting; whether a failure is retried is decided by the
    fetcher's retry predicate.
    """
    if isinstance(exc, requests.exceptions.HTTPError):
        response = exc.response
        if response is None:
            return ErrorKind.TRANSIENT
        status = response.status_code
        if status in _TRANSIENT_STATUSES or status >= 500:
            return ErrorKind.TRANSIENT
        return ErrorKind.TERMINAL
    if isinstance(exc, (
        requests.exceptions.ConnectionError,
        requests.exceptions.Timeout,
        requests.exceptions.ChunkedEncodingError,
    )):
        return ErrorKind.TRANSIENT
    if isinstance(exc, requests.exceptions.RequestException):
        # InvalidURL, MissingSchema, TooManyRedirects, ...
        return ErrorKind.TERMINAL
    return ErrorKind.TRANSIENT


def retry_always(exc: BaseException) -> bool:
    return True


class ResilientFetcher:
    """Performs GET requests, retrying failures with exponential backoff.

    Every error is retried by default, including terminal ones such as a 404;
    pass ``should_retry`` to narrow that. Once ``max_attempts`` attempts have
    failed, the last exception is re-raised unchanged.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        *,
        timeout: float = 30.0,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        initial_delay: float = 0.1,
        max_delay: float = 30.0,
        should_retry: Callable[[BaseException], bool] = retry_always,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self._should_retry = should_retry
        self._sleep = sleep or time.sleep

    def __enter__(self) -> "ResilientFetcher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def _log_failed_attempt(self, url: str) -> Callable[[RetryCallState], None]:
        def _before_sleep(retry_state: RetryCallState) -> None:
            exc = retry_state.outcome.exception() if retry_state.outcome else None
            kind = classify_error(exc) if exc is not None else ErrorKind.TRANSIENT
            logger.error(
                'Attempt %s failed because of "%s" (%s). Retrying...',
                retry_state.attempt_number,
                exc,
                kind.value,
                extra={"url": url, "attempt": retry_state.attempt_number, "error_kind": kind.value},
            )
        return _before_sleep

    def _retrying(self, url: str) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.initial_delay, max=self.max_delay),
            retry=retry_if_exception(self._should_retry),
            before_sleep=self._log_failed_attempt(url),
            sleep=self._sleep,
            reraise=True,
        )

    def _get_once(self, url: str) -> requests.Response:
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response

    def fetch(self, url: str) -> requests.Response:
        """GET ``url``; a non-2xx status counts as a failed attempt."""
        response = None
        for attempt in self._retrying(url):
            with attempt:
                response = self._get_once(url)
        return response

    def fetch_json(self, url: str) -> Any:
        # Decoding sits outside the retry loop: a malformed body is not retried.
        return self.fetch(url).json()

    def fetch_bytes(self, url: str) -> bytes:
        return self.fetch(url).content


__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "ErrorKind",
    "ResilientFetcher",
    "classify_error",
    "retry_always",
]
