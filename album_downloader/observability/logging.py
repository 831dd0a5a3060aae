import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

COMBINED_LOG_FILENAME = "combined.log"
ERROR_LOG_FILENAME = "error.log"

# Extra attributes worth carrying into the JSON payload when present
_EXTRA_FIELDS = ("url", "attempt", "error_kind")


class RunContextFilter(logging.Filter):
    """Attach the run identifier to log records."""

    def __init__(self, run_id: Optional[str] = None) -> None:
        super().__init__()
        self.run_id = run_id or uuid4().hex

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = self.run_id
        return True


class JsonFormatter(logging.Formatter):
    """Render log records as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "run_id": getattr(record, "run_id", None),
        }
        for field in _EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(
    log_dir: str,
    level: str = "INFO",
    enable_console: bool = True,
    run_id: Optional[str] = None,
) -> List[logging.Handler]:
    """
    Configure root logging with:
      - FileHandler (level+) writing JSON lines to combined.log
      - FileHandler (ERROR+) writing JSON lines to error.log
      - StreamHandler (level+) to stderr with a plain "level: message" format

    Handlers installed by an earlier call are replaced, not duplicated.
    Returns the handlers that were attached.
    """
    os.makedirs(log_dir, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)

    for handler in list(root.handlers):
        if getattr(handler, "_album_downloader", False):
            root.removeHandler(handler)
            handler.close()

    context_filter = RunContextFilter(run_id)
    json_formatter = JsonFormatter()

    combined_handler = logging.FileHandler(os.path.join(log_dir, COMBINED_LOG_FILENAME), encoding="utf-8")
    combined_handler.setLevel(level)
    combined_handler.setFormatter(json_formatter)

    error_handler = logging.FileHandler(os.path.join(log_dir, ERROR_LOG_FILENAME), encoding="utf-8")
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(json_formatter)

    handlers: List[logging.Handler] = [combined_handler, error_handler]

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        handlers.append(console_handler)

    for handler in handlers:
        handler._album_downloader = True  # type: ignore[attr-defined]
        handler.addFilter(context_filter)
        root.addHandler(handler)

    # Keep urllib3's connection chatter out of the run log
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return handlers


def shutdown_logging(handlers: List[logging.Handler]) -> None:
    """Flush, detach and close handlers returned by configure_logging."""
    root = logging.getLogger()
    for handler in handlers:
        try:
            handler.flush()
        finally:
            root.removeHandler(handler)
            handler.close()
