"""Logging setup for applications embedding selectkit."""

from __future__ import annotations

import logging
from typing import Optional

from .configuration import SystemConfig, get_config

PACKAGE_LOGGER = "selectkit"


def configure_logging(config: Optional[SystemConfig] = None) -> logging.Logger:
    """Attach a console handler to the ``selectkit`` logger.

    Safe to call repeatedly: the previous handler installed here is replaced.

    Args:
        config: Configuration to apply; loaded via ``get_config()`` if omitted

    Returns:
        The package logger
    """
    config = config or get_config()
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(config.logging.level)

    for handler in list(package_logger.handlers):
        if getattr(handler, "_selectkit_handler", False):
            package_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(config.logging.level)
    console_handler.setFormatter(logging.Formatter(config.logging.format, datefmt="%H:%M:%S"))
    console_handler._selectkit_handler = True  # type: ignore[attr-defined]
    package_logger.addHandler(console_handler)

    # Channel emission logs are DEBUG and very chatty
    emission_level = logging.DEBUG if config.logging.log_emissions else logging.INFO
    logging.getLogger("selectkit.state.channel").setLevel(
        max(emission_level, logging.getLevelName(config.logging.level))
    )

    package_logger.debug(f"Logging configured: level={config.logging.level}")
    return package_logger
