"""Structured JSON logging with async-safe correlation IDs.

One correlation ID covers one location-resolution attempt (geolocate,
reverse geocode, province, city list, city) across every await it makes.
The API takes it from X-Request-ID; the CLI mints one per run.
"""

import json
import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone

correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

# Keys picked up from logger.info(..., extra={...})
EXTRA_FIELDS = ("province", "city", "candidate", "step", "reason", "generation", "duration_ms")

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s%(cid)s: %(message)s"

NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "urllib3")


def get_correlation_id() -> str:
    """Return the current correlation ID, or empty string if not set."""
    return correlation_id.get()


@contextmanager
def correlation_scope(cid: str | None = None) -> Iterator[str]:
    """Bind a correlation ID (generated when not given) for the enclosed block."""
    cid = cid or uuid.uuid4().hex[:12]
    token = correlation_id.set(cid)
    try:
        yield cid
    finally:
        correlation_id.reset(token)


class CorrelationFilter(logging.Filter):
    """Expose the correlation ID to text formatters as ``%(cid)s``."""

    def filter(self, record: logging.LogRecord) -> bool:
        cid = correlation_id.get()
        record.cid = f" [{cid}]" if cid else ""
        return True


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON. Place names stay unescaped."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if cid := correlation_id.get():
            entry["correlation_id"] = cid
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)

        entry.update({
            key: getattr(record, key)
            for key in EXTRA_FIELDS
            if getattr(record, key, None) is not None
        })
        return json.dumps(entry, default=str, ensure_ascii=False)


def setup_logging(json_format: bool = True, level: str = "INFO") -> None:
    """Install a single stderr handler on the root logger.

    Args:
        json_format: JSON lines for the API and log shipping, text for a terminal.
        level: Log level name (DEBUG shows every resolution step).
    """
    handler = logging.StreamHandler()
    handler.addFilter(CorrelationFilter())
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers[:] = [handler]

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
