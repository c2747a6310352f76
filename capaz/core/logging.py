import logging
import sys
from typing import Any

import structlog

from capaz.config import AppConfig, get_config

# Chatty libraries kept at WARNING unless LOG_LEVEL=DEBUG
_NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "httpx", "uvicorn.access")


def configure_logging(config: AppConfig | None = None) -> None:
    """Configure structured logging from ``LOG_LEVEL`` and ``LOG_FORMAT``.

    ``LOG_FORMAT=json`` renders one JSON object per line; ``text`` renders the
    structlog console format for local development. Every event carries the
    deployment ``environment``.
    """
    config = config or get_config()
    level = logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    def add_environment(logger, method_name, event_dict):
        event_dict.setdefault("environment", config.environment)
        return event_dict

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        add_environment,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if config.log_format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=shared_processors + [renderer],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    if not any(h.get_name() == "capaz" for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name("capaz")
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    root.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if level <= logging.DEBUG else logging.WARNING)
