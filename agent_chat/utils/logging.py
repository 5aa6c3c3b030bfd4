"""Logging configuration."""

import logging
import os
import sys

from pydantic import BaseModel, Field


class LogConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    # Transport chatter drowns out snapshot logs
    quiet_loggers: list[str] = Field(default_factory=lambda: ["httpx", "langgraph_sdk", "uvicorn.access"])


def setup_logging(config: LogConfig | None = None) -> None:
    """Configure the root logger for the server or the terminal client."""
    if config is None:
        config = LogConfig()

    logging.basicConfig(
        level=getattr(logging, config.level.upper()),
        format=config.format,
        datefmt=config.date_format,
        stream=sys.stdout,
        force=True,
    )

    for name in config.quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger.

    LOG_LEVEL, when set, applies to the package loggers even before
    `setup_logging` has run.
    """
    logger = logging.getLogger(name)

    log_level = os.getenv("LOG_LEVEL")
    if log_level:
        logger.setLevel(log_level.upper())

    return logger
