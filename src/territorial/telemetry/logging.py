"""Structured logging sink for rule loading and decision tracing."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_EVENT_FIELDS_EXCLUDED = frozenset(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}


class EventFieldsFilter(logging.Filter):
    """Append fields passed through ``extra=`` to the event name."""

    def filter(self, record: logging.LogRecord) -> bool:
        fields = {
            key: value
            for key, value in vars(record).items()
            if key not in _EVENT_FIELDS_EXCLUDED and not key.startswith("_")
        }
        if fields and not getattr(record, "_fields_rendered", False):
            rendered = " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
            record.msg = f"{record.msg} {rendered}"
            record._fields_rendered = True
        return True


def configure_logging(level: str | int = "INFO", *, console: Console | None = None) -> logging.Logger:
    """Route ``territorial.*`` loggers through a rich console handler."""
    logger = logging.getLogger("territorial")
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(console=console or Console(stderr=True), show_path=False, rich_tracebacks=True)
    handler.addFilter(EventFieldsFilter())
    logger.addHandler(handler)
    return logger
