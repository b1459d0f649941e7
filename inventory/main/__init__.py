"""
Main module - Main/Composition Root Layer

Settings loading and the dependency container that wires the inventory
together. Hosting services call ``init_container`` once at startup and run
inside ``app_lifespan``.
"""

from .config import AppSettings, get_settings
from .container import AppContainer, app_lifespan, get_container, init_container

__all__ = [
    "AppSettings",
    "get_settings",
    "AppContainer",
    "app_lifespan",
    "init_container",
    "get_container",
]
