"""Logging configuration for the shipping domain.

Courier calls are noisy; structured key/value logs keep each booking
attempt attributable to its order. Credential values never reach a
handler: the ``mask_secrets`` processor blanks them wherever they appear
in an event.
"""

import logging
import logging.handlers
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import structlog

SECRET_KEYS = frozenset({"api_password", "password", "api_key_secure"})
MASK = "********"

_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}


def get_environment() -> str:
    return (os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    """LOG_LEVEL wins; otherwise derived from the environment."""
    return os.getenv("LOG_LEVEL", _LEVELS.get(get_environment(), "INFO")).upper()


def _rotating_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(level: str, log_dir: Path | None) -> None:
    """Route stdlib logging to stdout and, when ``log_dir`` is given, rotating files."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(_rotating_handler(log_dir / "parcelbridge.log", level))
        handlers.append(_rotating_handler(log_dir / "parcelbridge_error.log", logging.ERROR))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = handlers

    # requests logs every connection through urllib3
    for noisy in ("urllib3", "protean"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def mask_secrets(_logger, _method_name, event_dict: dict) -> dict:
    """structlog processor: blank credential values, including inside nested dicts."""

    def _mask(value):
        if isinstance(value, dict):
            return {key: MASK if key in SECRET_KEYS else _mask(item) for key, item in value.items()}
        return value

    return _mask(event_dict)


def setup_structlog(json_output: bool) -> None:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        mask_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(level: str | None = None, log_dir: str | None = "logs") -> None:
    """Configure stdlib and structlog once, at application start-up."""
    setup_stdlib_logging((level or get_log_level()).upper(), Path(log_dir) if log_dir else None)
    setup_structlog(json_output=get_environment() in ("production", "staging"))


@contextmanager
def order_log_context(order_id: str) -> Iterator[None]:
    """Tag every log line emitted inside the block with ``order_id``."""
    structlog.contextvars.bind_contextvars(order_id=order_id)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars("order_id")
