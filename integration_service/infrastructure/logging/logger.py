"""Structured logging setup built on structlog and the stdlib logging module."""
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import List, Optional

import structlog

from integration_service.config.schemas import LoggingConfig

_SHARED_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


def setup_logging(config: Optional[LoggingConfig] = None) -> structlog.stdlib.BoundLogger:
    """
    Set up structured logging for the application using structlog.

    Args:
        config: Logging configuration. Defaults are used when omitted.

    Returns:
        Configured structlog logger instance.
    """
    config = config or LoggingConfig()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.level))

    renderer = (
        structlog.processors.JSONRenderer()
        if config.json_format
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_SHARED_PROCESSORS,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handlers: List[logging.Handler] = []

    if config.destination in ("file", "both"):
        log_file = os.path.expandvars(config.file_path)
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=config.max_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if config.destination in ("stdout", "both"):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    # Remove any existing handlers and add new ones
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("integration_service")
    logger.debug(
        "Logging configured",
        log_level=config.level,
        log_destination=config.destination,
        json_format=config.json_format,
    )
    return logger


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger bound to ``name``."""
    return structlog.get_logger(name)


