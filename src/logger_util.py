"""
Structured JSON logging for the gifland bot.

Every entry is one JSON object per line on stdout so CloudWatch Logs Insights
(or any container log collector) can query it by field:

    {"level": "INFO", "event_type": "search_completed", "service": "gifland-interactions",
     "timestamp": 1700000000.0, "request_id": "...", "match_count": 3}

The logger is configured on first import. Hosts call set_request_id() at the
start of each request so entries can be correlated.
"""

import json
import logging
import sys
import time
import traceback
from typing import Any, Optional

LOGGER_NAME = "gifland-bot"

_request_id: Optional[str] = None


class _StdoutHandler(logging.StreamHandler):
    """StreamHandler bound to the current sys.stdout at emit time (pytest capsys swaps it)."""

    def __init__(self) -> None:
        super().__init__(sys.stdout)

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stdout
        super().emit(record)


def _setup() -> None:
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return
    logger.setLevel(logging.INFO)
    logger.propagate = False
    handler = _StdoutHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)


_setup()


def get_logger() -> logging.Logger:
    """Return the configured bot logger."""
    return logging.getLogger(LOGGER_NAME)


def set_request_id(request_id: Optional[str]) -> None:
    """Attach a request id (Lambda aws_request_id or generated) to subsequent entries."""
    global _request_id
    _request_id = request_id or None


def log(
    logger: logging.Logger,
    level: str,
    event_type: str,
    data: dict,
    *,
    service: str = "gifland-bot",
) -> None:
    """Log one structured JSON entry."""
    log_entry: dict[str, Any] = {
        "level": level,
        "event_type": event_type,
        "service": service,
        "timestamp": time.time(),
    }
    if _request_id:
        log_entry["request_id"] = _request_id
    log_entry.update(data)
    msg = json.dumps(log_entry, default=str, ensure_ascii=False)
    log_method = logger.warning if level.upper() == "WARN" else getattr(logger, level.lower(), logger.info)
    log_method(msg)


def log_exception(
    logger: logging.Logger,
    event_type: str,
    data: dict,
    error: BaseException,
    *,
    service: str = "gifland-bot",
) -> None:
    """Log an ERROR entry carrying the exception type, message and stack trace."""
    log(logger, "ERROR", event_type, {
        **data,
        "error": str(error),
        "error_type": type(error).__name__,
        "traceback": "".join(traceback.format_exception(type(error), error, error.__traceback__)),
    }, service=service)
