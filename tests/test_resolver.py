"""Tests for TemplateResolver and result segments.

Verifies:
- Placeholder substitution and directive tagging
- Adjacent literal text merged into one segment
- Plural branch selection: exact '=N', CLDR category, 'other'
- Quantity marker formatting per locale
- Missing-placeholder policies
- Positional and sequence arguments
"""

import logging
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from wordloom.diagnostics import DiagnosticCode, MissingPlaceholderError
from wordloom.enums import MissingPlaceholderPolicy
from wordloom.locale_utils import LocaleId
from wordloom.runtime.resolver import Arguments, TemplateResolver, normalize_arguments
from wordloom.runtime.segments import FormattedMessage, TextSegment, ValueSegment
from wordloom.syntax import parse

EN = LocaleId.parse("en")
LV = LocaleId.parse("lv")
RU = LocaleId.parse("ru")
DE = LocaleId.parse("de")

INBOX = "You have {count, plural, one{# item} other{# items}}"


def _resolve(
    raw: str,
    args: Arguments | None = None,
    *,
    locale: LocaleId = EN,
    resolver: TemplateResolver | None = None,
) -> FormattedMessage:
    resolver = resolver if resolver is not None else TemplateResolver()
    template = parse(raw)
    return resolver.resolve(template, key="test.key", locale=locale, args=args)


class TestSubstitution:
    """Test simple placeholder substitution."""

    def test_segments(self) -> None:
        result = _resolve("Hello, {name}!", {"name": "Ava"})
        assert result.segments == (
            TextSegment("Hello, "),
            ValueSegment("name", "Ava", None, "Ava"),
            TextSegment("!"),
        )
        assert result.text == "Hello, Ava!"
        assert result.locale == EN

    def test_value_kept_unconverted(self) -> None:
        result = _resolve("{total}", {"total": Decimal("9.50")})
        (segment,) = result.values
        assert segment.value == Decimal("9.50")
        assert segment.text == "9.50"

    def test_directive_tagged(self) -> None:
        result = _resolve("{name, bold} wins", {"name": "Ava"})
        assert result[0] == ValueSegment("name", "Ava", "bold", "Ava")

    def test_static_template_single_segment(self) -> None:
        assert _resolve("a \\{b\\} c").segments == (TextSegment("a {b} c"),)

    def test_empty_template(self) -> None:
        result = _resolve("")
        assert len(result) == 0
        assert result.text == ""

    def test_nested_formatted_message_value(self) -> None:
        inner = _resolve("Hello, {name}!", {"name": "Ava"})
        outer = _resolve("> {quote}", {"quote": inner})
        assert outer.text == "> Hello, Ava!"
        assert outer.values[0].value is inner

    def test_str_and_iteration(self) -> None:
        result = _resolve("a{x}b", {"x": 1})
        assert str(result) == "a1b"
        assert [type(s) for s in result] == [TextSegment, ValueSegment, TextSegment]
        assert result[1:] == (ValueSegment("x", 1, None, "1"), TextSegment("b"))


class TestPositionalArguments:
    """Test positional placeholders."""

    def test_sequence_args(self) -> None:
        assert _resolve("{0} of {1}", ["3", "7"]).text == "3 of 7"

    def test_int_keyed_mapping(self) -> None:
        assert _resolve("{0}", {0: "zero"}).text == "zero"

    def test_string_index_key(self) -> None:
        assert _resolve("{0}", {"0": "zero"}).text == "zero"

    def test_str_args_rejected(self) -> None:
        with pytest.raises(TypeError, match="not str"):
            normalize_arguments("abc")

    def test_none_args(self) -> None:
        assert normalize_arguments(None) == {}

    def test_mapping_not_copied(self) -> None:
        args = {"a": 1}
        assert normalize_arguments(args) is args


class TestPlurals:
    """Test plural selection."""

    @pytest.mark.parametrize(
        ("count", "expected"),
        [(1, "You have 1 item"), (5, "You have 5 items"), (0, "You have 0 items")],
    )
    def test_english(self, count: int, expected: str) -> None:
        assert _resolve(INBOX, {"count": count}).text == expected

    def test_quantity_segment(self) -> None:
        result = _resolve(INBOX, {"count": 1})
        assert result.segments == (
            TextSegment("You have "),
            ValueSegment("count", 1, None, "1"),
            TextSegment(" item"),
        )

    def test_exact_selector_beats_category(self) -> None:
        raw = "{n, plural, =0{no items} one{# item} other{# items}}"
        assert _resolve(raw, {"n": 0}).text == "no items"
        assert _resolve(raw, {"n": 1}).text == "1 item"

    def test_exact_selector_numeric_compare(self) -> None:
        raw = "{n, plural, =1{exactly one} other{#}}"
        assert _resolve(raw, {"n": 1.0}).text == "exactly one"
        assert _resolve(raw, {"n": Decimal("1.00")}).text == "exactly one"

    def test_locale_rules(self) -> None:
        raw = "{n, plural, zero{z} one{o} few{f} many{m} other{x}}"
        assert _resolve(raw, {"n": 0}, locale=LV).text == "z"
        assert _resolve(raw, {"n": 21}, locale=LV).text == "o"
        assert _resolve(raw, {"n": 3}, locale=RU).text == "f"
        assert _resolve(raw, {"n": 5}, locale=RU).text == "m"

    def test_missing_category_falls_to_other(self) -> None:
        raw = "{n, plural, one{o} other{x}}"
        assert _resolve(raw, {"n": 5}, locale=RU).text == "x"

    def test_quantity_formatted_for_locale(self) -> None:
        raw = "{n, plural, other{# Dinge}}"
        assert _resolve(raw, {"n": 1234}, locale=DE).text == "1.234 Dinge"

    def test_numeric_string_quantity(self) -> None:
        assert _resolve(INBOX, {"count": "1"}).text == "You have 1 item"

    def test_non_numeric_quantity_selects_other(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="wordloom.runtime.resolver"):
            result = _resolve(INBOX, {"count": "many"})
        assert result.text == "You have many items"
        assert any("not numeric" in r.getMessage() for r in caplog.records)

    def test_bool_quantity_selects_other(self) -> None:
        assert _resolve(INBOX, {"count": True}).text == "You have True items"

    def test_placeholder_inside_branch(self) -> None:
        raw = "{n, plural, one{{who} has # cat} other{{who} has # cats}}"
        assert _resolve(raw, {"n": 2, "who": "Ava"}).text == "Ava has 2 cats"

    def test_nested_plural_quantity_is_innermost(self) -> None:
        raw = "{a, plural, other{# [{b, plural, other{#}}]}}"
        assert _resolve(raw, {"a": 1, "b": 2}).text == "1 [2]"

    def test_missing_other_template_degrades(self) -> None:
        raw = "{n, plural, one{# item}}"
        assert _resolve(raw, {"n": 1}).text == raw

    def test_malformed_plural_not_substituted_inside(self) -> None:
        raw = "{n, plural, foo{Hi {name}}}"
        assert _resolve(raw, {"n": 1, "name": "Ava"}).text == raw
        assert _resolve("{ {name} }", {"name": "Ava"}).text == "{ {name} }"

    @given(n=st.integers(min_value=0, max_value=10**6))
    def test_english_property(self, n: int) -> None:
        """Property: English renders the 'one' branch exactly for 1."""
        text = _resolve(INBOX, {"count": n}).text
        assert text.endswith(" item") == (n == 1)


class TestMissingPlaceholder:
    """Test missing-placeholder policies."""

    def test_leave_delimiters(self) -> None:
        result = _resolve("Hi {name}, see {unused}", {"name": "Ava"})
        assert result.text == "Hi Ava, see {unused}"

    def test_leave_delimiters_keeps_directive_source(self) -> None:
        assert _resolve("{ who , bold }").text == "{ who , bold }"

    def test_leave_delimiters_plural(self) -> None:
        assert _resolve(INBOX).text == INBOX

    def test_substitute_marker(self) -> None:
        resolver = TemplateResolver(
            missing_placeholder_policy=MissingPlaceholderPolicy.SUBSTITUTE_MARKER,
            missing_placeholder_marker="[{key}:{name}]",
        )
        assert _resolve("Hi {name}", resolver=resolver).text == "Hi [test.key:name]"

    def test_raise(self) -> None:
        resolver = TemplateResolver(missing_placeholder_policy="raise")  # type: ignore[arg-type]
        with pytest.raises(MissingPlaceholderError) as exc_info:
            _resolve("Hi {0}", [], resolver=resolver)
        error = exc_info.value
        assert error.key == "test.key"
        assert error.placeholder == 0
        assert error.diagnostic is not None
        assert error.diagnostic.code is DiagnosticCode.PLACEHOLDER_NOT_PROVIDED

    def test_missing_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="wordloom.runtime.resolver"):
            _resolve("{gone}")
        assert any("not provided" in r.getMessage() for r in caplog.records)

    def test_policy_property(self) -> None:
        assert TemplateResolver().policy is MissingPlaceholderPolicy.LEAVE_DELIMITERS
