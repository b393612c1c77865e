"""Logging configuration for dofactory.

The package logs through loguru and is disabled on import, so applications
see nothing unless they call ``configure_logging``.
"""

import contextlib
import os
import sys
from typing import Literal

from loguru import logger
from pydantic import BaseModel, field_validator

LogLevel = Literal[
    "TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"
]

# Sinks installed by configure_logging
_handler_ids: list[int] = []


class LoggingConfig(BaseModel):
    """Configuration for dofactory log output"""

    level: LogLevel = "INFO"

    # Optional file sink, rotated and compressed
    log_file: str | None = None
    rotation: str = "1 day"
    retention: str = "30 days"

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        """Accept log levels in any case"""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("log_file", mode="before")
    @classmethod
    def empty_log_file_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """Load logging configuration from environment variables

        Reads ``DOFACTORY_LOG_LEVEL``, ``DOFACTORY_LOG_FILE``,
        ``DOFACTORY_LOG_ROTATION`` and ``DOFACTORY_LOG_RETENTION``.

        Raises:
            pydantic.ValidationError: If a value is invalid
        """
        return cls(
            level=os.getenv("DOFACTORY_LOG_LEVEL", "INFO"),
            log_file=os.getenv("DOFACTORY_LOG_FILE"),
            rotation=os.getenv("DOFACTORY_LOG_ROTATION", "1 day"),
            retention=os.getenv("DOFACTORY_LOG_RETENTION", "30 days"),
        )


def configure_logging(config: LoggingConfig | None = None) -> list[int]:
    """Enable dofactory logging and install its sinks.

    Only the sinks installed by an earlier call are replaced; handlers the
    application added itself, including loguru's default stderr sink, are
    left alone. The new sinks only receive dofactory records.

    Args:
        config: Logging configuration, loaded from the environment if omitted

    Returns:
        Ids of the installed loguru handlers
    """
    if config is None:
        config = LoggingConfig.from_env()

    logger.enable("dofactory")
    for handler_id in _handler_ids:
        # The application may have removed it already
        with contextlib.suppress(ValueError):
            logger.remove(handler_id)

    handlers = [logger.add(sys.stderr, level=config.level, filter="dofactory")]
    if config.log_file:
        handlers.append(
            logger.add(
                config.log_file,
                rotation=config.rotation,
                retention=config.retention,
                compression="gz",
                level=config.level,
                filter="dofactory",
            )
        )

    logger.info(f"dofactory logging enabled at {config.level}")
    _handler_ids[:] = handlers
    return handlers
