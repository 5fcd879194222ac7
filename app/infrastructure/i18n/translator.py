"""Translation engine.

Resolves message categories to message sources, translates messages and
formats the result either through the ICU message formatter or by simple
{placeholder} substitution.
"""

import re
import threading
from typing import Any, Callable, Dict, Mapping, Optional

from infrastructure.i18n.exceptions import ConfigurationError
from infrastructure.i18n.factory import create_object
from infrastructure.i18n.formatter import MessageFormatter
from infrastructure.i18n.models import Pending, Ready, Slot, make_slot, resolve_slot
from infrastructure.logging import get_module_logger

logger = get_module_logger()

# "{name," marks an ICU argument (number, date, select, plural, ...)
ICU_ARGUMENT = re.compile(r"\{\s*\w+\s*,")

CATCH_ALL = "*"


class Translator:
    """Translates and formats messages by category.

    The translation table maps categories to message sources. Keys are
    either literal categories ("app", "app.errors"), prefix patterns ending
    in "*" ("app.*"), or the catch-all "*". Values are message sources or
    configuration values instantiated through the object factory on first
    use; the instance then replaces the configuration value.

    Attributes:
        object_factory: Callable turning configuration values into instances.
    """

    def __init__(
        self,
        translations: Optional[Mapping[str, Any]] = None,
        message_formatter: Any = None,
        object_factory: Callable[[Any], Any] = create_object,
    ):
        """Initialize Translator.

        Args:
            translations: Category or pattern to message source (or config).
            message_formatter: Formatter instance or config. None uses the
                default MessageFormatter, built on first use.
            object_factory: Factory for configuration values.
        """
        self.object_factory = object_factory
        self._translations: Dict[str, Slot] = {
            pattern: make_slot(value) for pattern, value in (translations or {}).items()
        }
        self._formatter: Optional[Slot] = None
        self._lock = threading.RLock()
        self.set_message_formatter(message_formatter)

    @property
    def translations(self) -> Dict[str, Any]:
        """Current table: live sources or pending configuration values."""
        return {
            pattern: slot.instance if isinstance(slot, Ready) else slot.config
            for pattern, slot in self._translations.items()
        }

    def set_translation(self, pattern: str, value: Any) -> None:
        """Add or replace a translation table entry.

        Args:
            pattern: Category, "prefix*" pattern or "*".
            value: Message source or configuration value.
        """
        with self._lock:
            self._translations[pattern] = make_slot(value)

    def translate(
        self,
        category: str,
        message: str,
        params: Optional[Mapping[str, Any]] = None,
        language: Optional[str] = None,
    ) -> str:
        """Translate a message to the specified language.

        The translation is formatted with the given params. Messages without
        a translation are formatted in the source language of their message
        source.

        Args:
            category: Message category.
            message: Message to translate.
            params: Values for the message placeholders.
            language: Target language (e.g. "en-US"). None uses the source
                language of the category's message source.

        Returns:
            The translated and formatted message.

        Raises:
            ConfigurationError: If no message source is available for category.
        """
        source = self.get_message_source(category)
        if language is None:
            language = source.source_language

        translation = source.translate(category, message, language)
        if translation is None:
            return self.format(message, params, source.source_language)
        return self.format(translation, params, language)

    def format(
        self,
        message: str,
        params: Optional[Mapping[str, Any]],
        language: str,
    ) -> str:
        """Format a message.

        ICU patterns are delegated to the message formatter. When it fails,
        a warning is logged and simple {name} substitution is used instead.

        Args:
            message: Message to format.
            params: Values for the message placeholders.
            language: Language used for locale-aware formatting.

        Returns:
            The formatted message.
        """
        if not params:
            return message

        if ICU_ARGUMENT.search(message):
            formatter = self.get_message_formatter()
            result = formatter.format(message, params, language)
            if result is not None:
                return result
            logger.warning(
                "message_formatting_failed",
                language=language,
                error=formatter.get_error_message(),
                message=message,
            )

        for name, value in params.items():
            message = message.replace("{" + str(name) + "}", str(value))
        return message

    def get_message_source(self, category: str) -> Any:
        """Get the message source for a category.

        Resolution order: exact category, first matching "prefix*" pattern
        in declaration order, then the "*" catch-all.

        Args:
            category: Message category.

        Returns:
            The message source instance.

        Raises:
            ConfigurationError: If no message source matches the category.
        """
        with self._lock:
            if category in self._translations:
                return self._resolve(category)

            for pattern in self._translations:
                if "*" in pattern and category.startswith(pattern.rstrip("*")):
                    return self._resolve(pattern)

            if CATCH_ALL in self._translations:
                return self._resolve(CATCH_ALL)

        raise ConfigurationError(
            f"Unable to locate message source for category '{category}'."
        )

    def _resolve(self, pattern: str) -> Any:
        slot = self._translations[pattern]
        source, self._translations[pattern] = resolve_slot(slot, self.object_factory)
        if isinstance(slot, Pending):
            logger.info(
                "message_source_instantiated",
                pattern=pattern,
                source_class=type(source).__name__,
            )
        return source

    def get_message_formatter(self) -> Any:
        """Get the message formatter, instantiating it on first use.

        Returns:
            The formatter used for ICU message patterns.
        """
        with self._lock:
            if self._formatter is None:
                self._formatter = Ready(MessageFormatter())
            formatter, self._formatter = resolve_slot(
                self._formatter, self.object_factory
            )
            return formatter

    def set_message_formatter(self, value: Any) -> None:
        """Replace the message formatter.

        Args:
            value: Formatter instance, configuration value, or None for the
                default MessageFormatter.
        """
        with self._lock:
            self._formatter = None if value is None else make_slot(value)
