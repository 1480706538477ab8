"""Structured logging for barkbridge.

structlog on top of stdlib ``logging``, writing to stderr so command output on
stdout stays clean. Payment preimages and credentials never reach a log line.
"""

import logging
import sys
import time
from collections.abc import Mapping
from typing import Any, cast

import structlog
from structlog.types import EventDict, Processor

REDACTED = "***REDACTED***"

# A preimage is proof of payment, so it is handled like a credential
SENSITIVE_KEYS = frozenset(
    {
        "password",
        "secret",
        "token",
        "macaroon",
        "preimage",
        "payment_preimage",
    }
)


def _redact(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {
            key: REDACTED if key in SENSITIVE_KEYS else _redact(item)
            for key, item in value.items()
        }
    return value


def filter_sensitive_data(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Redact sensitive keys, including inside nested dict values (request bodies)."""
    for key, value in event_dict.items():
        if key in SENSITIVE_KEYS:
            event_dict[key] = REDACTED
        elif isinstance(value, Mapping):
            event_dict[key] = _redact(value)
    return event_dict


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Tag every entry with the package name and version."""
    from barkbridge import __version__

    event_dict.setdefault("app", "barkbridge")
    event_dict.setdefault("version", __version__)
    return event_dict


def _renderer(json_logs: bool, dev_mode: bool) -> list[Processor]:
    if json_logs:
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=dev_mode)]


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
    dev_mode: bool = True,
) -> None:
    """
    Configure structured logging.

    Safe to call more than once; the last call wins.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_logs: One JSON object per line, for log shipping
        dev_mode: Colored console output (ignored with ``json_logs``)
    """
    level = getattr(logging, log_level.upper())

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            add_app_context,
            filter_sensitive_data,
            *_renderer(json_logs, dev_mode),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    logging.getLogger().setLevel(level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Module logger: ``logger = get_logger(__name__)``."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


class LogPerformance:
    """
    Time a block and log ``<operation>_completed`` or ``<operation>_failed``.

    Usage:
        with LogPerformance("bark_pay", logger):
            response = await transport.execute(...)
    """

    def __init__(self, operation: str, logger: structlog.stdlib.BoundLogger):
        self.operation = operation
        self.logger = logger
        self.start_time = 0.0

    @property
    def elapsed_ms(self) -> float:
        return round((time.perf_counter() - self.start_time) * 1000, 2)

    def __enter__(self) -> "LogPerformance":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type is None:
            self.logger.debug(f"{self.operation}_completed", duration_ms=self.elapsed_ms)
            return
        self.logger.warning(
            f"{self.operation}_failed",
            duration_ms=self.elapsed_ms,
            error=str(exc_val),
            error_type=exc_type.__name__,
        )


configure_logging()
