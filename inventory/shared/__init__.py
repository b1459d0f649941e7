"""
Shared module - Cross-cutting concerns / Shared Layer

Constants, enums and the logging setup used by every other layer. Nothing in
here may depend on Infrastructure or frameworks.
"""

from .consts import (
    DEFAULT_DATABASE_NAME,
    DEVICES_COLLECTION,
    EnumEnvironment,
    EnumLogLevel,
)
from .logging import configure_logging, get_logger, update_logging_from_settings

__all__ = [
    "DEFAULT_DATABASE_NAME",
    "DEVICES_COLLECTION",
    "EnumEnvironment",
    "EnumLogLevel",
    "configure_logging",
    "get_logger",
    "update_logging_from_settings",
]
