"""Slot models for lazily instantiated i18n components.

Translation table entries and the formatter slot hold either a raw
configuration value or the live component built from it. Resolution turns
a Pending slot into a Ready one exactly once.
"""

from dataclasses import dataclass
from typing import Any, Callable, Tuple, Union


@dataclass(frozen=True)
class Pending:
    """Configuration value that has not been instantiated yet.

    Attributes:
        config: Dotted class path, mapping with a "class" key, or a class.
    """

    config: Any


@dataclass(frozen=True)
class Ready:
    """Live component built from a configuration value.

    Attributes:
        instance: The instantiated component.
    """

    instance: Any


Slot = Union[Pending, Ready]


def is_config_value(value: Any) -> bool:
    """Check whether a value is a configuration value rather than an instance.

    Args:
        value: Value stored in configuration.

    Returns:
        True for strings, mappings and classes, False otherwise.
    """
    return isinstance(value, (str, dict, type))


def make_slot(value: Any) -> Slot:
    """Wrap a configuration value or instance in the matching slot.

    Args:
        value: Configuration value or live instance.

    Returns:
        Pending for configuration values, Ready for instances.
    """
    if isinstance(value, (Pending, Ready)):
        return value
    if is_config_value(value):
        return Pending(value)
    return Ready(value)


def resolve_slot(slot: Slot, factory: Callable[[Any], Any]) -> Tuple[Any, Ready]:
    """Resolve a slot to its live instance.

    Args:
        slot: Slot to resolve.
        factory: Callable turning a configuration value into an instance.

    Returns:
        Tuple of the live instance and the Ready slot that should replace
        the given one.
    """
    if isinstance(slot, Ready):
        return slot.instance, slot
    instance = factory(slot.config)
    return instance, Ready(instance)
