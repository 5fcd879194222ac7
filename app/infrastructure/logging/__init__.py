"""Structured logging for the translation engine.

Example:
    from infrastructure.logging import get_module_logger

    logger = get_module_logger()
    logger.info("translator_created", categories=["app"])
"""

from infrastructure.logging.setup import (
    component_name,
    configure_logging,
    get_module_logger,
)

__all__ = [
    "component_name",
    "configure_logging",
    "get_module_logger",
]
