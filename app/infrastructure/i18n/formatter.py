"""ICU message formatting.

Defines the formatter contract used by the Translator and the default
MessageFormatter, which renders the ICU MessageFormat subset:

- simple arguments: {name}
- numbers: {count, number}, {ratio, number, percent}, {n, number, #,##0.00}
- dates and times: {day, date, long}, {at, time, short}
- select: {gender, select, female {she} male {he} other {they}}
- plural: {n, plural, offset:1 =0 {none} one {# item} other {# items}}
- ordinals: {place, selectordinal, one {#st} two {#nd} few {#rd} other {#th}}

Plural and ordinal categories and number/date formats come from CLDR data
through babel.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from decimal import Decimal
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional, Tuple

from babel import Locale, UnknownLocaleError
from babel.dates import format_date, format_time
from babel.numbers import (
    format_currency,
    format_decimal,
    format_percent,
    get_territory_currencies,
)

from infrastructure.i18n.exceptions import FormattingError
from infrastructure.logging import get_module_logger

logger = get_module_logger()

_SELECT_TYPES = ("select",)
_PLURAL_TYPES = ("plural", "selectordinal")
_IDENTIFIER = re.compile(r"\w+")
_SELECTOR = re.compile(r"=-?\d+(?:\.\d+)?|[\w-]+")
_INTEGER = re.compile(r"\d+")

# Raised by babel and the value conversions for values or styles it rejects
_ARGUMENT_ERRORS = (
    ValueError,
    TypeError,
    ArithmeticError,
    LookupError,
    AttributeError,
)


class BaseMessageFormatter(ABC):
    """Contract for message formatters.

    format() returns the formatted string, or None when formatting failed.
    The reason of the last failure is available from get_error_message().
    """

    def __init__(self):
        self._error_message: Optional[str] = None

    @abstractmethod
    def format(
        self, message: str, params: Mapping[str, Any], language: str
    ) -> Optional[str]:
        """Format a message pattern.

        Args:
            message: Message pattern.
            params: Values for the pattern arguments.
            language: Language tag used for locale-aware formatting.

        Returns:
            Formatted message, or None if formatting failed.
        """

    def get_error_message(self) -> Optional[str]:
        """Get the error of the last failed format() call."""
        return self._error_message


class _Pound:
    """Marker for '#' inside plural options."""

    def __repr__(self) -> str:
        return "#"


POUND = _Pound()


@dataclass(frozen=True)
class Argument:
    """Parsed pattern argument.

    Attributes:
        name: Argument name, looked up in the params mapping.
        type: Argument type (number, date, time, select, plural,
            selectordinal) or None for a simple argument.
        style: Style text for number/date/time arguments.
        options: Selector to sub-message nodes for select/plural arguments.
        offset: Plural offset.
    """

    name: str
    type: Optional[str] = None
    style: Optional[str] = None
    options: Dict[str, Tuple[Any, ...]] = field(default_factory=dict)
    offset: int = 0


class PatternParser:
    """Recursive descent parser for ICU message patterns."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        self.pos = 0

    def parse(self) -> Tuple[Any, ...]:
        """Parse the whole pattern into a tuple of nodes.

        Nodes are literal strings, Argument instances and POUND markers.

        Raises:
            FormattingError: If the pattern is malformed.
        """
        return self._parse_message(in_plural=False, nested=False)

    def _error(self, reason: str) -> FormattingError:
        return FormattingError(
            f"Message pattern is invalid: {reason} at position {self.pos}"
        )

    def _peek(self) -> str:
        return self.pattern[self.pos] if self.pos < len(self.pattern) else ""

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.pattern) and self.pattern[self.pos].isspace():
            self.pos += 1

    def _read(self, regex: "re.Pattern[str]", what: str) -> str:
        match = regex.match(self.pattern, self.pos)
        if match is None:
            raise self._error(f"expected {what}")
        self.pos = match.end()
        return match.group()

    def _parse_message(self, in_plural: bool, nested: bool) -> Tuple[Any, ...]:
        nodes: List[Any] = []
        text: List[str] = []

        def flush():
            if text:
                nodes.append("".join(text))
                text.clear()

        while self.pos < len(self.pattern):
            char = self.pattern[self.pos]
            if char == "'":
                text.append(self._parse_quoted(in_plural))
            elif char == "{":
                flush()
                self.pos += 1
                nodes.append(self._parse_argument(in_plural))
            elif char == "}":
                if nested:
                    break
                raise self._error("unmatched '}'")
            elif char == "#" and in_plural:
                flush()
                nodes.append(POUND)
                self.pos += 1
            else:
                text.append(char)
                self.pos += 1
        else:
            if nested:
                raise self._error("unterminated sub-message")

        flush()
        return tuple(nodes)

    def _parse_quoted(self, in_plural: bool) -> str:
        # pos is on an apostrophe
        following = self.pattern[self.pos + 1 : self.pos + 2]
        if following == "'":
            self.pos += 2
            return "'"
        if not following or following not in "{}|" and not (
            following == "#" and in_plural
        ):
            self.pos += 1
            return "'"

        self.pos += 1
        quoted: List[str] = []
        while self.pos < len(self.pattern):
            char = self.pattern[self.pos]
            if char == "'":
                if self.pattern[self.pos + 1 : self.pos + 2] == "'":
                    quoted.append("'")
                    self.pos += 2
                    continue
                self.pos += 1
                break
            quoted.append(char)
            self.pos += 1
        return "".join(quoted)

    def _parse_argument(self, in_plural: bool) -> Argument:
        # pos is right after the opening brace
        self._skip_whitespace()
        name = self._read(_IDENTIFIER, "argument name")
        self._skip_whitespace()

        char = self._peek()
        if char == "}":
            self.pos += 1
            return Argument(name)
        if char != ",":
            raise self._error(f"expected ',' or '}}' after argument '{name}'")
        self.pos += 1

        self._skip_whitespace()
        arg_type = self._read(_IDENTIFIER, "argument type").lower()
        self._skip_whitespace()

        char = self._peek()
        if char == "}":
            if arg_type in _SELECT_TYPES + _PLURAL_TYPES:
                raise self._error(f"argument type '{arg_type}' requires options")
            self.pos += 1
            return Argument(name, arg_type)
        if char != ",":
            raise self._error(f"expected ',' or '}}' after type of argument '{name}'")
        self.pos += 1

        if arg_type in _SELECT_TYPES + _PLURAL_TYPES:
            return self._parse_options(name, arg_type, in_plural)

        end = self.pattern.find("}", self.pos)
        if end == -1:
            raise self._error(f"unterminated argument '{name}'")
        style = self.pattern[self.pos : end].strip()
        self.pos = end + 1
        return Argument(name, arg_type, style=style or None)

    def _parse_options(self, name: str, arg_type: str, in_plural: bool) -> Argument:
        offset = 0
        options: Dict[str, Tuple[Any, ...]] = {}
        sub_in_plural = in_plural or arg_type in _PLURAL_TYPES

        self._skip_whitespace()
        if arg_type == "plural" and self.pattern.startswith("offset:", self.pos):
            self.pos += len("offset:")
            self._skip_whitespace()
            offset = int(self._read(_INTEGER, "plural offset"))

        while True:
            self._skip_whitespace()
            char = self._peek()
            if not char:
                raise self._error(f"unterminated argument '{name}'")
            if char == "}":
                self.pos += 1
                break

            selector = self._read(_SELECTOR, "selector")
            self._skip_whitespace()
            if self._peek() != "{":
                raise self._error(f"expected '{{' after selector '{selector}'")
            self.pos += 1
            nodes = self._parse_message(sub_in_plural, nested=True)
            self.pos += 1

            if selector in options:
                raise self._error(f"duplicate selector '{selector}'")
            options[selector] = nodes

        if "other" not in options:
            raise FormattingError(
                f"Message pattern is invalid: argument '{name}' has no 'other' option"
            )
        return Argument(name, arg_type, options=options, offset=offset)


@lru_cache(maxsize=512)
def parse_pattern(pattern: str) -> Tuple[Any, ...]:
    """Parse a message pattern, caching the result.

    Raises:
        FormattingError: If the pattern is malformed.
    """
    return PatternParser(pattern).parse()


@lru_cache(maxsize=128)
def parse_locale(language: str, fallback_language: str) -> Locale:
    """Parse a language tag into a babel Locale, caching the result.

    Unknown or malformed tags resolve to the fallback language.
    """
    try:
        return Locale.parse(language.replace("_", "-"), sep="-")
    except (UnknownLocaleError, ValueError, TypeError):
        logger.debug(
            "unknown_formatting_language",
            language=language,
            fallback_language=fallback_language,
        )
        return Locale.parse(fallback_language, sep="-")


def _to_number(value: Any) -> Any:
    if isinstance(value, bool):
        raise TypeError("expected a number, got bool")
    if isinstance(value, (int, float, Decimal)):
        return value
    if isinstance(value, str):
        return Decimal(value.strip())
    raise TypeError(f"expected a number, got {type(value).__name__}")


class MessageFormatter(BaseMessageFormatter):
    """Default ICU formatter backed by babel.

    Attributes:
        fallback_language: Language whose rules are used when the requested
            language tag is unknown to CLDR.
    """

    def __init__(self, fallback_language: str = "en"):
        super().__init__()
        self.fallback_language = fallback_language

    def format(
        self, message: str, params: Mapping[str, Any], language: str
    ) -> Optional[str]:
        """Format a message pattern.

        Simple arguments without a value are left untouched. Every other
        problem (malformed pattern, missing value for a typed argument,
        value of the wrong kind) makes the call fail.

        Args:
            message: ICU message pattern.
            params: Values for the pattern arguments.
            language: Language tag (e.g. "en-US", "fr").

        Returns:
            Formatted message, or None if formatting failed.
        """
        self._error_message = None
        try:
            nodes = parse_pattern(message)
            return self._render(nodes, params or {}, self.get_locale(language), None)
        except FormattingError as e:
            self._error_message = str(e)
            return None
        except RecursionError:
            self._error_message = "Message pattern is nested too deeply"
            return None

    def get_locale(self, language: Any) -> Locale:
        """Get the babel Locale for a language tag.

        Unknown tags resolve to the fallback language.
        """
        return parse_locale(str(language), self.fallback_language)

    def _render(
        self,
        nodes: Tuple[Any, ...],
        params: Mapping[str, Any],
        locale: Locale,
        plural_value: Any,
    ) -> str:
        parts = []
        for node in nodes:
            if isinstance(node, str):
                parts.append(node)
            elif node is POUND:
                parts.append(format_decimal(plural_value, locale=locale))
            else:
                parts.append(self._format_argument(node, params, locale, plural_value))
        return "".join(parts)

    def _format_argument(
        self,
        arg: Argument,
        params: Mapping[str, Any],
        locale: Locale,
        plural_value: Any,
    ) -> str:
        if arg.name not in params:
            if arg.type is None:
                return "{" + arg.name + "}"
            raise FormattingError(f"Missing argument '{arg.name}'")

        value = params[arg.name]
        try:
            if arg.type is None:
                return self._format_simple(value, locale)
            if arg.type == "number":
                return self._format_number(value, arg.style, locale)
            if arg.type in ("date", "time"):
                return self._format_datetime(value, arg.type, arg.style, locale)
            if arg.type in _SELECT_TYPES:
                nodes = arg.options.get(str(value), arg.options["other"])
                return self._render(nodes, params, locale, plural_value)
            if arg.type in _PLURAL_TYPES:
                return self._format_plural(arg, value, params, locale)
        except _ARGUMENT_ERRORS as e:
            raise FormattingError(
                f"Unable to format argument '{arg.name}': {e}"
            ) from e

        raise FormattingError(
            f"Unsupported type '{arg.type}' for argument '{arg.name}'"
        )

    def _format_simple(self, value: Any, locale: Locale) -> str:
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            return format_decimal(value, locale=locale)
        return str(value)

    def _format_number(self, value: Any, style: Optional[str], locale: Locale) -> str:
        number = _to_number(value)
        if not style:
            return format_decimal(number, locale=locale)
        if style == "integer":
            return format_decimal(number, format="#,##0", locale=locale)
        if style == "percent":
            return format_percent(number, locale=locale)
        if style == "currency":
            currencies = (
                get_territory_currencies(locale.territory) if locale.territory else []
            )
            if not currencies:
                raise FormattingError(f"No currency is known for locale '{locale}'")
            return format_currency(number, currencies[0], locale=locale)
        return format_decimal(number, format=style, locale=locale)

    def _format_datetime(
        self, value: Any, arg_type: str, style: Optional[str], locale: Locale
    ) -> str:
        style = style or "medium"
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            value = datetime.fromtimestamp(float(value), tz=timezone.utc)

        if arg_type == "date":
            if not isinstance(value, date):
                raise TypeError(f"expected a date, got {type(value).__name__}")
            return format_date(value, format=style, locale=locale)

        if isinstance(value, datetime):
            return format_time(
                value,
                format=style,
                tzinfo=value.tzinfo or timezone.utc,
                locale=locale,
            )
        if isinstance(value, time):
            return format_time(value, format=style, locale=locale)
        raise TypeError(f"expected a time, got {type(value).__name__}")

    def _format_plural(
        self,
        arg: Argument,
        value: Any,
        params: Mapping[str, Any],
        locale: Locale,
    ) -> str:
        number = _to_number(value)
        adjusted = number - arg.offset

        exact = Decimal(str(number))
        for selector, nodes in arg.options.items():
            if selector.startswith("=") and Decimal(selector[1:]) == exact:
                return self._render(nodes, params, locale, adjusted)

        if arg.type == "selectordinal":
            rule = locale.ordinal_form
        else:
            rule = locale.plural_form
        category = rule(abs(adjusted))
        nodes = arg.options.get(category, arg.options["other"])
        return self._render(nodes, params, locale, adjusted)
