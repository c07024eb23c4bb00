"""Structured Logging — JSON log lines for production, plain text for local runs.

Invariants:
    - Every line carries timestamp (from the record), level, logger and message
    - Domain extras passed via `extra=` (contest_id, order_id, wallet, ...) become top-level keys
    - Calling setup_logging again swaps the handler, never stacks a second one
    - Per-request chatter from httpx/botocore/uvicorn.access stays at WARNING

Design Decisions:
    - Stdlib logging + a small formatter: uvicorn, SQLAlchemy and Alembic already log there
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "contest_id", "meme_id", "order_id", "goods_id", "wallet",
    "error_code", "path", "attempt", "event_type", "service",
)

_NOISY_LOGGERS = ("httpx", "httpcore", "botocore", "boto3", "uvicorn.access")

_installed: logging.Handler | None = None


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({
            key: getattr(record, key)
            for key in EXTRA_FIELDS
            if getattr(record, key, None) is not None
        })
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def build_handler(fmt: str) -> logging.Handler:
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        ))
    return handler


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the root handler once per process (lifespan startup)."""
    global _installed
    root = logging.getLogger()
    if _installed is not None:
        root.removeHandler(_installed)
    _installed = build_handler(fmt)
    root.addHandler(_installed)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
