# noqa: D104 - package initialization
from .logging import JsonFormatter, RunContextFilter, configure_logging, shutdown_logging  # noqa: F401
