"""Object factory for i18n components.

Turns configuration values into live message sources and formatters.
Supported configuration values:

- "package.module.ClassName" or "package.module:ClassName"
- {"class": "package.module.ClassName", **constructor_kwargs}
- a class object (called with no arguments)

Any other value is treated as an already-built instance and returned as is.
"""

import importlib
from typing import Any

import structlog

from infrastructure.i18n.exceptions import ConfigurationError

logger = structlog.get_logger()


def import_class(path: str) -> Any:
    """Import an attribute from a dotted path.

    Args:
        path: "module.attr" or "module:attr".

    Returns:
        The imported attribute.

    Raises:
        ConfigurationError: If the module or attribute cannot be imported.
    """
    if ":" in path:
        module_name, _, attr = path.partition(":")
    else:
        module_name, _, attr = path.rpartition(".")

    if not module_name or not attr:
        raise ConfigurationError(f"Invalid class path: '{path}'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Unable to import module '{module_name}': {e}") from e

    try:
        return getattr(module, attr)
    except AttributeError as e:
        raise ConfigurationError(
            f"Module '{module_name}' has no attribute '{attr}'"
        ) from e


def create_object(config: Any) -> Any:
    """Create an object from a configuration value.

    Args:
        config: Class path, mapping with a "class" key, class, or instance.

    Returns:
        The created object, or config itself when it is already an instance.

    Raises:
        ConfigurationError: If the configuration is invalid or construction fails.

    Usage:
        source = create_object(
            {
                "class": "infrastructure.i18n.sources.YAMLMessageSource",
                "base_path": "messages",
            }
        )
    """
    if isinstance(config, str):
        target, kwargs = import_class(config), {}
    elif isinstance(config, dict):
        kwargs = dict(config)
        target = kwargs.pop("class", None)
        if target is None:
            raise ConfigurationError(
                "Object configuration must contain a 'class' element."
            )
        if isinstance(target, str):
            target = import_class(target)
    elif isinstance(config, type):
        target, kwargs = config, {}
    else:
        return config

    if not callable(target):
        raise ConfigurationError(f"Configured class is not callable: {target!r}")

    try:
        instance = target(**kwargs)
    except TypeError as e:
        raise ConfigurationError(
            f"Unable to instantiate {getattr(target, '__name__', target)}: {e}"
        ) from e

    logger.debug(
        "object_created",
        object_class=type(instance).__name__,
        options=sorted(kwargs),
    )
    return instance
