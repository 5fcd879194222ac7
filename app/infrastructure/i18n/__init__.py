"""i18n system - message translation and formatting.

Resolves message categories to message sources, translates messages and
formats them with ICU message patterns or simple {placeholder} substitution.

Main components:
- translator: Translator engine (category resolution, translate, format)
- sources: MessageSource base, CatalogMessageSource and YAMLMessageSource
- formatter: BaseMessageFormatter contract and the babel-backed MessageFormatter
- factory: create_object for lazily instantiated components
- service: create_translator and TranslationService facade
"""

from infrastructure.i18n.exceptions import (
    ConfigurationError,
    FormattingError,
    I18nError,
)
from infrastructure.i18n.factory import create_object
from infrastructure.i18n.formatter import BaseMessageFormatter, MessageFormatter
from infrastructure.i18n.service import TranslationService, create_translator
from infrastructure.i18n.sources import (
    CatalogMessageSource,
    MessageSource,
    YAMLMessageSource,
)
from infrastructure.i18n.translator import Translator

__all__ = [
    "I18nError",
    "ConfigurationError",
    "FormattingError",
    "create_object",
    "BaseMessageFormatter",
    "MessageFormatter",
    "MessageSource",
    "CatalogMessageSource",
    "YAMLMessageSource",
    "Translator",
    "TranslationService",
    "create_translator",
]
