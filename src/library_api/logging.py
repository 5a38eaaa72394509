"""Structured logging for the library API.

Every record goes through structlog, including records from stdlib loggers
(uvicorn, SQLAlchemy), and is written to stdout as one JSON object per line.
Set LOG_FORMAT=console for readable local output.

Request-scoped values bound with structlog.contextvars (request_id, bound by
RequestIDMiddleware) are merged into every record emitted during the request.
"""

import logging
import logging.config
import sys
from typing import Any, Literal

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from structlog.stdlib import BoundLogger

# Third-party loggers that are too chatty at INFO
_QUIET_LOGGERS = ("aiosqlite", "asyncio", "httpx")


class LoggingSettings(BaseSettings):
    """LOG_LEVEL and LOG_FORMAT from the environment or .env."""

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: Literal["json", "console"] = Field(default="json", alias="LOG_FORMAT")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )


def _pre_chain(settings: LoggingSettings) -> list[Any]:
    """Processors shared by structlog loggers and foreign stdlib records."""
    chain: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.log_format == "json":
        # Tracebacks as structured frames; ConsoleRenderer prints them itself
        chain.append(structlog.processors.dict_tracebacks)
    return chain


def _renderer(settings: LoggingSettings) -> Any:
    if settings.log_format == "console":
        return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    return structlog.processors.JSONRenderer()


def configure_logging(settings: LoggingSettings) -> None:
    """Route structlog and stdlib logging through one stdout handler.

    Runs once, when this module is first imported.
    """
    pre_chain = _pre_chain(settings)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structured": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        _renderer(settings),
                    ],
                    "foreign_pre_chain": pre_chain,
                },
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": "structured",
                    "stream": sys.stdout,
                },
            },
            "root": {"handlers": ["stdout"], "level": settings.log_level},
            "loggers": {name: {"level": "WARNING"} for name in _QUIET_LOGGERS},
        }
    )


configure_logging(LoggingSettings())


def get_logger(name: str) -> BoundLogger:
    """Return a structlog logger named after the calling module.

    Example::

        logger = get_logger(__name__)
        logger.info("book_created", book_id=str(book.id))
    """
    return structlog.get_logger(name)  # type: ignore[no-any-return]
