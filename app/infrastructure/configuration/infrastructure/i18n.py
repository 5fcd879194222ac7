"""Message translation infrastructure settings."""

from typing import Any, Dict, Optional

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from infrastructure.configuration.base import InfrastructureSettings


class I18nSettings(InfrastructureSettings):
    """Translation engine configuration.

    Environment Variables:
        I18N_SOURCE_LANGUAGE: Language the messages are written in (default: en-US)
        I18N_LANGUAGE: Default target language for translations (default: en-US)
        I18N_MESSAGES_DIR: Base directory of the default "app" YAML catalogs
        I18N_TRANSLATIONS: JSON mapping of category (or pattern) to source config
        I18N_MESSAGE_FORMATTER: Optional dotted path of the ICU formatter class

    Translation config values follow the object factory conventions: a dotted
    class path, or a mapping with a "class" key and constructor arguments.

    Example:
        ```bash
        I18N_TRANSLATIONS='{"billing*": {"class": "infrastructure.i18n.sources.YAMLMessageSource", "base_path": "messages/billing"}}'
        ```
    """

    model_config = SettingsConfigDict(env_prefix="I18N_")

    SOURCE_LANGUAGE: str = Field(
        default="en-US",
        description="Language the original messages are written in",
    )

    LANGUAGE: str = Field(
        default="en-US",
        description="Default language messages are translated to",
    )

    MESSAGES_DIR: str = Field(
        default="messages",
        description="Base path of the YAML catalogs backing the 'app' category",
    )

    TRANSLATIONS: Dict[str, Any] = Field(
        default_factory=dict,
        description="Category or pattern to message source configuration",
    )

    MESSAGE_FORMATTER: Optional[str] = Field(
        default=None,
        description="Dotted path of a custom message formatter class",
    )
