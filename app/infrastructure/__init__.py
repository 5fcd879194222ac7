"""Infrastructure modules.

Centralized infrastructure components:
- configuration: Settings management (settings, I18nSettings)
- logging: Structured logging (configure_logging, get_module_logger)
- i18n: Message translation and formatting (Translator, TranslationService)
"""
