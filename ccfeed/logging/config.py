"""Root logger setup: JSON or key-value lines on stdout."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Literal

from .context import get_log_context

LogFormat = Literal["json", "key-value"]

SERVICE_NAME = "ccfeed"

# LogRecord attributes that are plumbing rather than payload.
_RECORD_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName", "levelname",
        "levelno", "lineno", "module", "msecs", "message", "pathname", "process",
        "processName", "relativeCreated", "thread", "threadName", "asctime",
        "exc_info", "exc_text", "stack_info", "taskName",
    }
)


def _payload_items(record: logging.LogRecord, skip=frozenset()):
    for key, value in record.__dict__.items():
        if key in _RECORD_ATTRS or key in skip or key.startswith("_"):
            continue
        yield key, value


class ContextualFilter(logging.Filter):
    """Stamp every record with service/environment and the active log context.

    Fields set explicitly on the log call are never overwritten by context.
    """

    def __init__(self, service: str = SERVICE_NAME, environment: str = "local"):
        super().__init__()
        self.service = service
        self.environment = environment

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service
        record.environment = self.environment
        for key, value in get_log_context().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line with ``timestamp``, ``level`` and ``message`` first."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": _utc_millis(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in _payload_items(record):
            if isinstance(value, datetime):
                entry[key] = value.isoformat()
            elif isinstance(value, (str, int, float, bool, list, dict, type(None))):
                entry[key] = value
            else:
                entry[key] = str(value)

        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


class KeyValueFormatter(logging.Formatter):
    """``2026-01-01 10:00:00 [INFO] ccfeed.feed: message key=value ...``"""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        pairs = [
            f"{key}={_kv_value(value)}"
            for key, value in sorted(_payload_items(record, skip={"service", "environment"}))
        ]
        return f"{line} {' '.join(pairs)}" if pairs else line


def _kv_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, datetime):
        return value.isoformat()
    text = str(value)
    if isinstance(value, str) and any(ch in text for ch in ' =,'):
        return f'"{text}"'
    return text


def _utc_millis(created: float) -> str:
    stamp = datetime.fromtimestamp(created, tz=timezone.utc)
    return stamp.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def configure_logging(
    level: str = "INFO",
    format_type: LogFormat = "key-value",
    environment: str = "local",
) -> None:
    """Replace the root logger's handlers with a single stdout handler.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (case-insensitive)
        format_type: ``json`` or ``key-value``
        environment: Label stamped on every record

    Raises:
        ValueError: If level or format_type is not recognised
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    if format_type not in ("json", "key-value"):
        raise ValueError(f"Invalid log format: {format_type}. Must be 'json' or 'key-value'")

    handler = logging.StreamHandler(sys.stdout)
    if format_type == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            KeyValueFormatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    handler.addFilter(ContextualFilter(environment=environment))

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()
    root.addHandler(handler)

    # werkzeug logs every request line at INFO; keep it to warnings unless debugging.
    if numeric_level > logging.DEBUG:
        logging.getLogger("werkzeug").setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={
            "event": "logging.configured",
            "component": "logging",
            "log_level": level.upper(),
            "log_format": format_type,
        },
    )
