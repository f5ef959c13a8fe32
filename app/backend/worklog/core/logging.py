"""structlog pipeline for the reporting API."""

import logging

import structlog
from structlog.typing import EventDict, WrappedLogger

from worklog.core.config import LOG_LEVELS


def level_number(level: str) -> int:
    name = level.strip().upper()
    if name not in LOG_LEVELS:
        raise ValueError(f"Unknown log level {level!r}; expected one of: {', '.join(LOG_LEVELS)}.")
    return logging.getLevelNamesMapping()[name]


def _service_stamper(service: str):
    def add_service(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service)
        return event_dict

    return add_service


def configure_logging(level: str = "INFO", *, service: str = "worklog") -> None:
    """Send structlog events and stdlib records to stdout as JSON lines.

    Every event carries ``service`` so records from this API can be picked
    out of a shared sink.
    """

    threshold = level_number(level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _service_stamper(service),
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(level=threshold, format="%(message)s")


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)
