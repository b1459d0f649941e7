"""
Logging Configuration - Shared Layer

Structured logging for the inventory service. Standard library records and
structlog events are rendered by the same formatter so that driver logs
(pymongo) and application events end up in one stream.
"""

import logging
import os
import sys
from typing import Any, Dict, List, Optional

import structlog
from structlog.types import Processor

from inventory.shared.consts import EnumEnvironment

# pymongo is very chatty at DEBUG (heartbeats, pool events)
NOISY_LOGGERS = ("pymongo", "pymongo.topology", "pymongo.connection")


def _get_log_config_from_env() -> Dict[str, Optional[str]]:
    """
    Read bootstrap logging configuration from the environment.

    Used before the settings object exists.
    """
    return {
        "level": os.environ.get("LOG_LEVEL", "INFO"),
        "file_path": os.environ.get("LOG_FILE_PATH"),
        "environment": os.environ.get("ENVIRONMENT", EnumEnvironment.DEVELOPMENT),
    }


def _shared_processors() -> List[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _build_handlers(log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    return handlers


def configure_logging(
    level: Optional[str] = None,
    file_path: Optional[str] = None,
    environment: Optional[str] = None,
) -> None:
    """
    Configure stdlib logging and structlog.

    Call once at startup before settings are loaded, then again through
    ``update_logging_from_settings`` once they are.

    Args:
        level: Log level name, overrides ``LOG_LEVEL``.
        file_path: Optional log file, overrides ``LOG_FILE_PATH``.
        environment: Application environment; production renders JSON.
    """
    env_config = _get_log_config_from_env()

    log_level = (level or env_config["level"] or "INFO").upper()
    log_file = file_path or env_config["file_path"]
    env_value = str(environment or env_config["environment"]).lower()

    numeric_level = getattr(logging, log_level, logging.INFO)

    renderer: Processor
    if env_value == EnumEnvironment.PRODUCTION:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
        ],
    )

    handlers = _build_handlers(log_file)
    for handler in handlers:
        handler.setFormatter(formatter)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.handlers = handlers
    root_logger.setLevel(numeric_level)

    if numeric_level <= logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.INFO)

    get_logger(__name__).info(
        "logging.configured", level=log_level, file_path=log_file
    )


def update_logging_from_settings(settings: Any) -> None:
    """
    Reconfigure logging from the loaded application settings.

    Args:
        settings: ``AppSettings`` instance (or anything shaped like it).
    """
    try:
        level = settings.logging.level
        environment = settings.environment
        configure_logging(
            level=getattr(level, "value", level),
            file_path=settings.logging.file_path,
            environment=getattr(environment, "value", environment),
        )
    except (AttributeError, OSError) as e:
        logging.error(f"Failed to update logging from settings: {e}")


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger configured for the project."""
    return structlog.get_logger(name)
