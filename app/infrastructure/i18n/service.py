"""Translation service for dependency injection.

Provides the factory building a Translator from settings and a class-based
facade for easier DI and testing.
"""

from typing import Any, Dict, Mapping, Optional

from infrastructure.configuration import I18nSettings
from infrastructure.i18n.translator import Translator
from infrastructure.logging import get_module_logger

logger = get_module_logger()

DEFAULT_SOURCE_CLASS = "infrastructure.i18n.sources.YAMLMessageSource"


def create_translator(
    settings: Optional[I18nSettings] = None,
    translations: Optional[Mapping[str, Any]] = None,
) -> Translator:
    """Create and configure a Translator instance.

    Unless "app" or "app*" is configured, an "app" entry backed by YAML
    catalogs under settings.MESSAGES_DIR is added.

    Args:
        settings: Translation settings (default: loaded from environment).
        translations: Extra table entries, overriding configured ones.

    Returns:
        Translator: Configured translator instance

    Usage:
        translator = create_translator()

        translator = create_translator(
            translations={"billing": CatalogMessageSource(catalogs)}
        )
    """
    settings = settings or I18nSettings()

    table: Dict[str, Any] = dict(settings.TRANSLATIONS)
    table.update(translations or {})
    if "app" not in table and "app*" not in table:
        table["app"] = {
            "class": DEFAULT_SOURCE_CLASS,
            "base_path": settings.MESSAGES_DIR,
            "source_language": settings.SOURCE_LANGUAGE,
        }

    translator = Translator(
        translations=table,
        message_formatter=settings.MESSAGE_FORMATTER,
    )
    logger.info(
        "translator_created",
        patterns=list(table),
        source_language=settings.SOURCE_LANGUAGE,
    )
    return translator


class TranslationService:
    """Class-based translation service.

    Wraps a Translator with the application default language to support
    dependency injection and easier testing with mocks.

    Usage:
        service = TranslationService()
        message = service.t("app", "Hello {name}", {"name": "Max"}, "fr-FR")
    """

    def __init__(
        self,
        translator: Optional[Translator] = None,
        language: Optional[str] = None,
        settings: Optional[I18nSettings] = None,
    ):
        """Initialize translation service.

        Args:
            translator: Optional pre-configured Translator instance.
                If not provided, creates one from settings.
            language: Default target language (default: settings.LANGUAGE).
            settings: Translation settings (default: loaded from environment).
        """
        settings = settings or I18nSettings()
        self._translator = translator or create_translator(settings)
        self.language = language or settings.LANGUAGE

    def t(
        self,
        category: str,
        message: str,
        params: Optional[Mapping[str, Any]] = None,
        language: Optional[str] = None,
    ) -> str:
        """Translate a message.

        Args:
            category: Message category
            message: Message to translate
            params: Values for the message placeholders
            language: Target language (default: the service language)

        Returns:
            Translated and formatted message

        Raises:
            ConfigurationError: If no message source is available for category
        """
        return self._translator.translate(
            category, message, params, language or self.language
        )

    def format(
        self,
        message: str,
        params: Optional[Mapping[str, Any]] = None,
        language: Optional[str] = None,
    ) -> str:
        """Format a message without translating it."""
        return self._translator.format(message, params, language or self.language)

    @property
    def translator(self) -> Translator:
        """Access underlying Translator instance."""
        return self._translator
