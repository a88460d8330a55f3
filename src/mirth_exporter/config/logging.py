"""Log output for the exporter process.

Scrape failures are reported here and nowhere else: the metrics only carry
``mirth_up 0``. Records go to stdout as text or as one JSON object per line,
and the Mirth credentials are redacted before either formatter sees them.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from mirth_exporter.utils.validation import sanitize_log_message

# Set through ``extra=`` by the collector.
_EXTRA_FIELDS = ("path", "duration_ms", "channel_count")

# Per-request chatter from the HTTP stack; one line per scrape is enough.
_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


class SanitizingFilter(logging.Filter):
    """Redact basic-auth userinfo, Authorization values and passwords."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.msg:
            record.msg = sanitize_log_message(str(record.msg))
        if record.args:
            record.args = tuple(
                sanitize_log_message(arg) if isinstance(arg, str) else arg
                for arg in record.args
            )
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with scrape context when present."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(
            (name, getattr(record, name))
            for name in _EXTRA_FIELDS
            if hasattr(record, name)
        )
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


class TextFormatter(logging.Formatter):
    def __init__(self):
        super().__init__(
            fmt="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )


def configure_logging(
    level: str = "INFO", format: str = "text", sanitize_logs: bool = True
) -> None:
    """Route exporter logs to stdout, replacing any existing root handlers.

    Called from the app lifespan and from ``mirth-exporter scrape`` with the
    ``LOG_LEVEL``, ``LOG_FORMAT`` and ``SANITIZE_LOGS`` settings.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(JSONFormatter() if format.lower() == "json" else TextFormatter())
    if sanitize_logs:
        handler.addFilter(SanitizingFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
