from .http_fetcher import ErrorKind, ResilientFetcher, classify_error, retry_always  # noqa: F401
