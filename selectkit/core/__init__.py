"""
Core Module
===========

Event bus, event definitions, configuration and logging setup.
"""

# Event System
from .event_bus import EventBus, EventPayload
from . import events

# Errors
from .errors import ConfigurationError, SelectKitError

# Configuration
from .configuration import (
    ConfigManager,
    SystemConfig,
    ValidationLevel,
    get_config,
    get_config_manager,
)
from .logging_config import configure_logging

__all__ = [
    # Event System
    "EventBus",
    "EventPayload",
    "events",
    # Errors
    "ConfigurationError",
    "SelectKitError",
    # Configuration
    "ConfigManager",
    "SystemConfig",
    "ValidationLevel",
    "get_config",
    "get_config_manager",
    "configure_logging",
]
