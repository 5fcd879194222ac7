"""Message sources for the i18n system.

A message source maps (category, message, language) to a translated string.
translate() returns None when no translation is available, in which case the
Translator formats the original message in the source's own language.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional, Tuple

import yaml

from infrastructure.logging import get_module_logger

logger = get_module_logger()

MissingTranslationHandler = Callable[[str, str, str], Optional[str]]


class MessageSource(ABC):
    """Base class for message sources.

    Messages are loaded lazily per (category, language) through
    load_messages() and cached for the lifetime of the source.

    Attributes:
        source_language: Language the original messages are written in.
        force_translation: Translate even when the requested language is
            the source language.
        on_missing_translation: Optional callback (category, message,
            language) returning a replacement for a missing translation.
    """

    def __init__(
        self,
        source_language: str = "en-US",
        force_translation: bool = False,
        on_missing_translation: Optional[MissingTranslationHandler] = None,
    ):
        self.source_language = source_language
        self.force_translation = force_translation
        self.on_missing_translation = on_missing_translation
        self._messages: Dict[Tuple[str, str], Dict[str, str]] = {}

    def translate(
        self, category: str, message: str, language: str
    ) -> Optional[str]:
        """Translate a message.

        Args:
            category: Message category.
            message: Message to translate.
            language: Target language.

        Returns:
            The translation, or None if the message is not translated.
        """
        if self.force_translation or language != self.source_language:
            return self._translate_message(category, message, language)
        return None

    def _translate_message(
        self, category: str, message: str, language: str
    ) -> Optional[str]:
        key = (category, language)
        if key not in self._messages:
            self._messages[key] = self.load_messages(category, language)

        translation = self._messages[key].get(message)
        if translation:
            return translation

        logger.debug(
            "missing_translation",
            category=category,
            language=language,
            message=message,
        )
        if self.on_missing_translation is not None:
            return self.on_missing_translation(category, message, language) or None
        return None

    @abstractmethod
    def load_messages(self, category: str, language: str) -> Dict[str, str]:
        """Load the message translations for a category and language.

        Args:
            category: Message category.
            language: Target language.

        Returns:
            Mapping of original message to translation.
        """

    def clear_cache(self) -> None:
        """Drop all loaded messages."""
        self._messages.clear()


class CatalogMessageSource(MessageSource):
    """Message source backed by in-memory catalogs.

    Catalogs are organized as {language: {category: {message: translation}}}.

    Example:
        source = CatalogMessageSource(
            {"fr-FR": {"app": {"Hello {name}": "Bonjour {name}"}}}
        )
    """

    def __init__(
        self,
        catalogs: Optional[Mapping[str, Mapping[str, Mapping[str, str]]]] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.catalogs = catalogs or {}

    def load_messages(self, category: str, language: str) -> Dict[str, str]:
        return dict(self.catalogs.get(language, {}).get(category, {}))


class YAMLMessageSource(MessageSource):
    """Message source reading YAML files.

    Expects files at <base_path>/<language>/<category>.yml containing a flat
    mapping of original message to translation. When the language has a
    region (e.g. "fr-FR"), the file of the bare language ("fr") is loaded
    first and the region specific file overrides it.

    Attributes:
        base_path: Directory containing one sub-directory per language.
        file_map: Optional mapping of category to file path relative to the
            language directory.
    """

    def __init__(
        self,
        base_path: Path,
        file_map: Optional[Mapping[str, str]] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.base_path = Path(base_path)
        self.file_map = dict(file_map or {})

    def get_message_file_path(self, category: str, language: str) -> Path:
        """Get the catalog file path for a category and language."""
        file_name = self.file_map.get(category, f"{category}.yml")
        return self.base_path / language / file_name

    def load_messages(self, category: str, language: str) -> Dict[str, str]:
        """Load messages, merging the bare language file as fallback.

        Raises:
            ValueError: If a catalog file is not valid YAML.
        """
        messages: Dict[str, str] = {}
        fallback_language = language.split("-")[0]
        if fallback_language != language:
            messages.update(self._load_file(category, fallback_language))
        messages.update(self._load_file(category, language))

        logger.info(
            "loaded_messages",
            category=category,
            language=language,
            message_count=len(messages),
        )
        return messages

    def _load_file(self, category: str, language: str) -> Dict[str, str]:
        path = self.get_message_file_path(category, language)
        if not path.is_file():
            logger.warning(
                "message_file_not_found",
                category=category,
                language=language,
                file=str(path),
            )
            return {}

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error("yaml_parse_error", file=str(path), error=str(e))
            raise ValueError(f"Failed to parse {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning("invalid_yaml_format", file=str(path), expected="dict")
            return {}

        messages: Dict[str, str] = {}
        for key, value in data.items():
            if value is None:
                continue
            if isinstance(value, (dict, list)):
                logger.warning(
                    "invalid_message_format",
                    file=str(path),
                    message=str(key),
                    expected="scalar",
                )
                continue
            messages[str(key)] = str(value)
        return messages
