"""Tests for infrastructure.i18n.formatter module."""

from datetime import date, datetime, timezone

import pytest

from infrastructure.i18n import FormattingError, MessageFormatter
from infrastructure.i18n.formatter import (
    POUND,
    Argument,
    PatternParser,
    parse_locale,
    parse_pattern,
)


@pytest.fixture
def formatter():
    """Default MessageFormatter."""
    return MessageFormatter()


@pytest.mark.unit
class TestPatternParser:
    """Tests for PatternParser."""

    def test_parse_simple_argument(self):
        """Literal text and simple arguments become separate nodes."""
        nodes = PatternParser("Hello {name}!").parse()

        assert nodes == ("Hello ", Argument("name"), "!")

    def test_parse_typed_argument_with_style(self):
        """Typed arguments keep their style text."""
        (node,) = PatternParser("{ratio, number, percent}").parse()

        assert node == Argument("ratio", "number", style="percent")

    def test_parse_plural_options(self):
        """Plural arguments parse offset, selectors and '#' markers."""
        (node,) = PatternParser("{n, plural, offset:1 =0 {none} other {# more}}").parse()

        assert node.type == "plural"
        assert node.offset == 1
        assert node.options == {"=0": ("none",), "other": (POUND, " more")}

    def test_pound_outside_plural_is_text(self):
        """'#' is only special inside plural options."""
        assert PatternParser("Issue #{id}").parse() == ("Issue #", Argument("id"))

    @pytest.mark.parametrize(
        "pattern",
        [
            "Hello }",
            "{name",
            "{, number}",
            "{n number}",
            "{n, plural, one {# item}}",
            "{n, plural, other {x}",
            "{n, select}",
            "{n, select, a {x} a {y} other {z}}",
            "{n, plural, other x}",
        ],
    )
    def test_invalid_patterns(self, pattern):
        """Malformed patterns raise FormattingError."""
        with pytest.raises(FormattingError):
            PatternParser(pattern).parse()

    def test_parse_pattern_is_cached(self):
        """parse_pattern() reuses the parsed nodes."""
        pattern = "{count, number} items"

        assert parse_pattern(pattern) is parse_pattern(pattern)


@pytest.mark.unit
class TestMessageFormatter:
    """Tests for MessageFormatter.format()."""

    def test_simple_argument(self, formatter):
        """Simple arguments are substituted."""
        assert formatter.format("Hello {name}", {"name": "Max"}, "en") == "Hello Max"

    def test_missing_simple_argument_is_kept(self, formatter):
        """Simple arguments without a value stay untouched."""
        result = formatter.format("Hello {name}, {n, number}", {"n": 5}, "en")

        assert result == "Hello {name}, 5"

    def test_simple_number_uses_locale(self, formatter):
        """Numbers in simple arguments use locale grouping."""
        assert formatter.format("{n}", {"n": 1234567}, "en") == "1,234,567"

    @pytest.mark.parametrize(
        "pattern,value,language,expected",
        [
            ("{n, number}", 1234.5, "en", "1,234.5"),
            ("{n, number}", 1234.5, "de", "1.234,5"),
            ("{n, number, integer}", 1234.4, "en", "1,234"),
            ("{n, number, percent}", 0.25, "en", "25%"),
            ("{n, number, #,##0.00}", 3, "en", "3.00"),
            ("{n, number, currency}", 12.5, "en-US", "$12.50"),
            ("{n, number}", "42", "en", "42"),
        ],
    )
    def test_number(self, formatter, pattern, value, language, expected):
        """Number arguments support the common styles."""
        assert formatter.format(pattern, {"n": value}, language) == expected

    def test_date(self, formatter):
        """Date arguments use CLDR date formats."""
        day = date(2024, 1, 15)

        assert formatter.format("{d, date}", {"d": day}, "en") == "Jan 15, 2024"
        assert formatter.format("{d, date, long}", {"d": day}, "en") == "January 15, 2024"

    @pytest.mark.parametrize(
        "gender,expected",
        [("female", "She replied"), ("male", "He replied"), ("robot", "They replied")],
    )
    def test_select(self, formatter, gender, expected):
        """Select picks the matching option or "other"."""
        pattern = "{g, select, female {She} male {He} other {They}} replied"

        assert formatter.format(pattern, {"g": gender}, "en") == expected

    @pytest.mark.parametrize(
        "count,expected",
        [(0, "no files"), (1, "1 file"), (2, "2 files"), (1000, "1,000 files")],
    )
    def test_plural_english(self, formatter, count, expected):
        """Plural uses exact matches first, then CLDR categories."""
        pattern = "{n, plural, =0 {no files} one {# file} other {# files}}"

        assert formatter.format(pattern, {"n": count}, "en") == expected

    @pytest.mark.parametrize(
        "count,expected",
        [(0, "0 fichier"), (1, "1 fichier"), (2, "2 fichiers")],
    )
    def test_plural_french(self, formatter, count, expected):
        """French treats zero as singular."""
        pattern = "{n, plural, one {# fichier} other {# fichiers}}"

        assert formatter.format(pattern, {"n": count}, "fr-FR") == expected

    @pytest.mark.parametrize(
        "count,expected",
        [
            (1, "only Max"),
            (2, "Max and 1 other"),
            (3, "Max and 2 others"),
        ],
    )
    def test_plural_offset(self, formatter, count, expected):
        """Offsets shift the category and '#' but not exact matches."""
        pattern = (
            "{n, plural, offset:1 =1 {only {name}} "
            "one {{name} and # other} other {{name} and # others}}"
        )

        assert formatter.format(pattern, {"n": count, "name": "Max"}, "en") == expected

    @pytest.mark.parametrize(
        "place,expected",
        [(1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"), (11, "11th"), (22, "22nd")],
    )
    def test_selectordinal(self, formatter, place, expected):
        """Ordinals use CLDR ordinal rules."""
        pattern = "{p, selectordinal, one {#st} two {#nd} few {#rd} other {#th}}"

        assert formatter.format(pattern, {"p": place}, "en") == expected

    def test_pound_in_nested_select(self, formatter):
        """'#' inside a select nested in a plural renders the plural value."""
        pattern = "{n, plural, other {{g, select, female {she has #} other {they have #}}}}"

        assert formatter.format(pattern, {"n": 4, "g": "female"}, "en") == "she has 4"

    def test_apostrophe_quoting(self, formatter):
        """Apostrophes quote syntax characters and '' is a literal apostrophe."""
        pattern = "It''s '{literal}' and {n, plural, other {'#' is #}}"

        assert formatter.format(pattern, {"n": 5}, "en") == "It's {literal} and # is 5"

    def test_lone_apostrophe_is_literal(self, formatter):
        """An apostrophe not followed by syntax is kept."""
        assert formatter.format("I'm {name}", {"name": "Max"}, "en") == "I'm Max"

    def test_unknown_language_uses_fallback_rules(self, formatter):
        """Unknown language tags use the fallback language rules."""
        pattern = "{n, plural, one {# item} other {# items}}"

        assert formatter.format(pattern, {"n": 1}, "xx-YY") == "1 item"

    def test_locales_are_cached(self, formatter):
        """Locales are parsed once per language tag."""
        assert formatter.get_locale("fr-FR") is formatter.get_locale("fr-FR")

    @pytest.mark.parametrize(
        "pattern,params,error",
        [
            ("{n, plural, one {x}}", {"n": 1}, "no 'other' option"),
            ("{n, number}", {"x": 1}, "Missing argument 'n'"),
            ("{n, plural, other {#}}", {"n": "abc"}, "Unable to format argument 'n'"),
            ("{n, number}", {"n": True}, "Unable to format argument 'n'"),
            ("{n, spellout}", {"n": 1}, "Unsupported type 'spellout'"),
            ("{n, number, currency}", {"n": 1}, "No currency"),
            ("{d, date}", {"d": "yesterday"}, "Unable to format argument 'd'"),
            (
                "{d, date, bogus}",
                {"d": date(2024, 1, 15)},
                "Unable to format argument 'd'",
            ),
            (
                "{d, time, bogus}",
                {"d": datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)},
                "Unable to format argument 'd'",
            ),
        ],
    )
    def test_failures(self, formatter, pattern, params, error):
        """Failures return None and keep the error message."""
        assert formatter.format(pattern, params, "en") is None
        assert error in formatter.get_error_message()

    def test_error_message_is_reset(self, formatter):
        """A successful call clears the previous error."""
        formatter.format("{n, number}", {}, "en")
        formatter.format("{n, number}", {"n": 1}, "en")

        assert formatter.get_error_message() is None

    def test_deeply_nested_pattern_fails(self, formatter):
        """Patterns nested beyond the recursion limit fail without raising."""
        depth = 2000
        pattern = "{n, select, other {" * depth + "x" + "}}" * depth

        assert formatter.format(pattern, {"n": 1}, "en") is None
        assert "nested too deeply" in formatter.get_error_message()

    def test_locale_cache_is_bounded(self, formatter):
        """Arbitrary language tags never grow the locale cache past its size."""
        for i in range(300):
            formatter.get_locale(f"zz-{i}")

        info = parse_locale.cache_info()
        assert info.currsize <= info.maxsize == 128
