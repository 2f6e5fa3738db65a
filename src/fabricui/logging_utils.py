"""Logging bootstrap with optional structured output."""

import logging
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from .config import Settings

APP_LOGGER_PREFIX = "fabricui"


def _app_only_filter(record: logging.LogRecord) -> bool:
    return record.name.startswith(APP_LOGGER_PREFIX)


def configure_logging(settings: "Settings") -> None:
    """Configure root logging according to settings using structlog."""
    level = getattr(logging, settings.log_level, logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    if settings.structured_logs:
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.TimeStamper(fmt="iso", utc=True),
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        formatter: logging.Formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(ensure_ascii=False),
            foreign_pre_chain=[
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso", utc=True),
            ],
        )
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(_app_only_filter)
    root.addHandler(handler)

    # Werkzeug logs every poll from the browser.
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
