"""Custom exceptions for the i18n system.

Provides the error taxonomy for message source resolution and message
formatting.
"""


class I18nError(Exception):
    """Base exception for all i18n errors.

    Example:
        try:
            translator.translate("app", "Hello")
        except I18nError as e:
            logger.error("translation_failed", error=str(e))
    """

    pass


class ConfigurationError(I18nError):
    """Raised when the translation configuration cannot be satisfied.

    Covers categories without a matching message source and configuration
    values the object factory cannot turn into a live component.

    Example:
        >>> translator.get_message_source("nope")
        Traceback (most recent call last):
        ...
        ConfigurationError: Unable to locate message source for category 'nope'.
    """

    pass


class FormattingError(I18nError):
    """Raised by the message formatter when a pattern cannot be rendered.

    Never escapes MessageFormatter.format(): it is turned into a failed
    result with the error message kept for get_error_message().
    """

    pass
