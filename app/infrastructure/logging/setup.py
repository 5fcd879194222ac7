"""Structlog configuration for the translation engine.

Every module of the package gets its logger from get_module_logger(), which
binds the module's component name (e.g. "i18n.translator") so translation
events can be filtered per component:

    logger = get_module_logger()
    logger.warning("message_formatting_failed", language="fr", error="...")

Output is rendered for humans in development and as JSON lines in
production. Nothing is emitted while pytest is running.
"""

import inspect
import logging
import sys
from typing import Any, List, Optional

import structlog
from structlog.stdlib import BoundLogger

from infrastructure.configuration import Settings, settings as app_settings

PACKAGE_ROOT = "infrastructure"


def _is_test_environment() -> bool:
    """Detect if running under pytest."""
    return "pytest" in sys.modules


def _build_processors(prod_mode: bool) -> List[Any]:
    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
            ]
        ),
        structlog.processors.format_exc_info,
    ]
    if prod_mode:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


def configure_logging(
    settings: Optional[Settings] = None,
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
) -> BoundLogger:
    """Configure structured logging.

    Args:
        settings: Settings to read LOG_LEVEL and ENVIRONMENT from. Defaults
            to the application settings.
        log_level: Override for the log level (DEBUG, INFO, WARNING, ...).
        is_production: Override for production mode (JSON output).

    Returns:
        The root bound logger.
    """
    settings = settings or app_settings

    if _is_test_environment():
        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s", level=logging.CRITICAL + 1, force=True
        )
        return structlog.stdlib.get_logger()

    prod_mode = is_production if is_production is not None else settings.is_production
    structlog.configure(
        processors=_build_processors(prod_mode),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    level = (log_level or settings.LOG_LEVEL).upper()
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level, logging.INFO),
    )
    return structlog.stdlib.get_logger()


logger: BoundLogger = configure_logging()


def component_name(module_name: str) -> str:
    """Get the component name of a module.

    The package root is dropped, so "infrastructure.i18n.translator" becomes
    "i18n.translator". Modules outside the package keep their full name.
    """
    prefix = PACKAGE_ROOT + "."
    if module_name.startswith(prefix):
        return module_name[len(prefix) :]
    return module_name


def get_module_logger() -> BoundLogger:
    """Get a logger bound to the calling module's component name."""
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    module = inspect.getmodule(caller) if caller is not None else None
    if module is None:
        return logger.bind(component="unknown")
    return logger.bind(
        component=component_name(module.__name__), module_path=module.__name__
    )
