"""KPop Idol API logging.

Production writes one JSON object per line; debug mode writes readable
lines. Request context travels on the record through ``extra``:

    logger.warning("Rejected request", extra={"method": "GET", "path": "/api/data",
                                              "reason": "missing bearer token"})
"""

import json
import logging
import sys

from kpopapi.core.config import Settings

# Attributes copied from LogRecord.extra into the output, in this order
CONTEXT_FIELDS = ("method", "path", "status", "reason", "user", "role", "idol_id")


def record_context(record: logging.LogRecord) -> dict[str, object]:
    return {
        field: getattr(record, field)
        for field in CONTEXT_FIELDS
        if getattr(record, field, None) is not None
    }


class JSONFormatter(logging.Formatter):
    """JSON line formatter with request context fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update(record_context(record))
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Readable formatter: the message followed by key=value context."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)-7s %(name)s: %(message)s", "%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if context:
            line += " " + " ".join(f"{key}={value}" for key, value in context.items())
        return line


def setup_logging(config: Settings) -> None:
    """Install a single stdout handler on the root logger.

    ``debug`` selects the console format, otherwise JSON.
    """
    level = config.log_level.upper()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ConsoleFormatter() if config.debug else JSONFormatter())

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    # The access gate already logs rejections with context
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if level == "DEBUG" else logging.WARNING
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the kpopapi namespace."""
    return logging.getLogger(f"kpopapi.{name}")
