"""Tests for the placeholder parser.

Verifies:
- Named, positional and directive placeholders
- Plural placeholders, exact selectors and the quantity marker
- Escapes
- Total parsing: malformed syntax degrades to literal text
- Diagnostics for missing 'other' branches and excessive nesting
- Determinism (property-based)
"""

import time

import pytest
from hypothesis import given
from hypothesis import strategies as st

from wordloom.diagnostics import DiagnosticCode
from wordloom.syntax import (
    Literal,
    ParsedTemplate,
    Placeholder,
    PluralPlaceholder,
    QuantityMarker,
    TemplateParser,
    extract_placeholders,
    parse,
)


def _texts(template: ParsedTemplate) -> str:
    """Concatenate root literal text (for degradation checks)."""
    return "".join(node.text for node in template.root if isinstance(node, Literal))


class TestPlaceholders:
    """Test simple placeholder recognition."""

    def test_plain_text(self) -> None:
        template = parse("Hello")
        assert template.root == (Literal("Hello"),)
        assert template.is_static

    def test_empty_template(self) -> None:
        template = parse("")
        assert template.root == ()
        assert template.diagnostics == ()

    def test_named_placeholder(self) -> None:
        template = parse("Hello, {name}!")
        assert template.root == (
            Literal("Hello, "),
            Placeholder(name="name", source="{name}"),
            Literal("!"),
        )
        assert not template.is_static

    def test_positional_placeholders(self) -> None:
        template = parse("{0} of {1}")
        names = [node.name for node in template.root if Placeholder.guard(node)]
        assert names == [0, 1]

    def test_dotted_and_dashed_names(self) -> None:
        template = parse("{user.first-name}")
        assert template.root == (Placeholder(name="user.first-name", source="{user.first-name}"),)

    def test_whitespace_around_name(self) -> None:
        (node,) = parse("{ name }").root
        assert Placeholder.guard(node)
        assert node.name == "name"

    def test_directive(self) -> None:
        (node,) = parse("{name, bold}").root
        assert Placeholder.guard(node)
        assert node.directive == "bold"

    def test_directive_kept_opaque(self) -> None:
        (node,) = parse("{when, date, short}").root
        assert Placeholder.guard(node)
        assert node.directive == "date, short"

    def test_empty_directive_is_none(self) -> None:
        (node,) = parse("{name,}").root
        assert Placeholder.guard(node)
        assert node.directive is None


class TestPlurals:
    """Test plural placeholder parsing."""

    def test_plural_branches(self) -> None:
        template = parse("{count, plural, one{# item} other{# items}}")
        (node,) = template.root
        assert PluralPlaceholder.guard(node)
        assert node.name == "count"
        assert node.selectors == ("one", "other")
        one = template.sequence(node.branch("one"))
        assert one == (QuantityMarker(), Literal(" item"))

    def test_exact_selector(self) -> None:
        (node,) = parse("{n, plural, =0{none} other{#}}").root
        assert PluralPlaceholder.guard(node)
        assert node.selectors == ("=0", "other")

    def test_duplicate_selector_first_wins(self) -> None:
        template = parse("{n, plural, one{first} one{second} other{x}}")
        (node,) = template.root
        assert PluralPlaceholder.guard(node)
        assert node.selectors == ("one", "other")
        assert template.sequence(node.branch("one")) == (Literal("first"),)

    def test_nested_placeholder_in_branch(self) -> None:
        template = parse("{n, plural, one{{who} has # cat} other{{who} has # cats}}")
        (node,) = template.root
        assert PluralPlaceholder.guard(node)
        other = template.sequence(node.branch("other"))
        assert other[0] == Placeholder(name="who", source="{who}")
        assert QuantityMarker() in other

    def test_nested_plural(self) -> None:
        template = parse("{a, plural, other{{b, plural, one{x} other{y}}}}")
        assert extract_placeholders(template) == frozenset({"a", "b"})

    def test_hash_outside_plural_is_literal(self) -> None:
        assert parse("#1 fan").root == (Literal("#1 fan"),)

    def test_escaped_hash_in_plural(self) -> None:
        template = parse("{n, plural, other{\\# #}}")
        (node,) = template.root
        assert PluralPlaceholder.guard(node)
        assert template.sequence(node.branch("other")) == (Literal("# "), QuantityMarker())

    def test_unknown_selector_degrades(self) -> None:
        template = parse("{n, plural, lots{x} other{y}}")
        assert not any(PluralPlaceholder.guard(node) for node in template.nodes)
        assert template.diagnostics == ()
        assert _texts(template) == "{n, plural, lots{x} other{y}}"


class TestEscapes:
    """Test escape sequences."""

    def test_escaped_braces(self) -> None:
        assert parse("\\{name\\}").root == (Literal("{name}"),)

    def test_escaped_backslash(self) -> None:
        assert parse("a\\\\b").root == (Literal("a\\b"),)

    def test_backslash_before_other_char_kept(self) -> None:
        assert parse("C:\\path").root == (Literal("C:\\path"),)

    def test_trailing_backslash_kept(self) -> None:
        assert parse("end\\").root == (Literal("end\\"),)


class TestDegradation:
    """Malformed syntax never raises and becomes literal text."""

    @pytest.mark.parametrize(
        "source",
        [
            "Hello {name",
            "Hello name}",
            "{}",
            "{ }",
            "{bad name}",
            "{1abc}",
            "{n, plural,}",
            "{n, plural, one}",
            "{n, plural, one x}",
            "{n, plural, foo{Hi {name}}}",
            "{ {name} }",
            "{bad name {x} {n, plural, other{#}}}",
            "{{",
            "}}{",
        ],
    )
    def test_malformed_kept_verbatim(self, source: str) -> None:
        template = parse(source)
        assert template.is_static
        assert _texts(template) == source

    def test_unmatched_open_then_valid_placeholder(self) -> None:
        template = parse("{ {name}")
        assert template.root == (Literal("{ "), Placeholder(name="name", source="{name}"))

    def test_rejected_span_has_no_nested_nodes(self) -> None:
        template = parse("a {n, plural, foo{Hi {name}}} b")
        assert template.root == (Literal("a {n, plural, foo{Hi {name}}} b"),)
        assert len(template.nodes) == 1
        assert extract_placeholders(template) == frozenset()

    def test_placeholder_after_rejected_span(self) -> None:
        template = parse("{ {a} }{b}")
        assert template.root == (Literal("{ {a} }"), Placeholder(name="b", source="{b}"))

    def test_nested_rejected_plurals_parse_in_linear_passes(self) -> None:
        source = "x"
        for _ in range(40):
            source = "{n, plural, other{" + source + "} bad{y}}"
        started = time.perf_counter()
        template = parse(source)
        elapsed = time.perf_counter() - started
        assert _texts(template) == source
        assert elapsed < 1.0

    def test_missing_other_records_diagnostic(self) -> None:
        source = "You have {count, plural, one{# item}}"
        template = parse(source)
        assert _texts(template) == source
        assert template.has_errors
        (diagnostic,) = template.diagnostics
        assert diagnostic.code is DiagnosticCode.PLURAL_MISSING_OTHER
        assert diagnostic.span is not None
        assert source[diagnostic.span.start : diagnostic.span.end] == (
            "{count, plural, one{# item}}"
        )

    def test_depth_limit(self) -> None:
        parser = TemplateParser(max_depth=1)
        template = parser.parse("{a, plural, other{{b, plural, other{x}}}}")
        (outer,) = template.root
        assert PluralPlaceholder.guard(outer)
        inner = template.sequence(outer.branch("other"))
        assert inner == (Literal("{b, plural, other{x}}"),)
        assert [d.code for d in template.diagnostics] == [DiagnosticCode.NESTING_DEPTH_EXCEEDED]

    def test_invalid_max_depth(self) -> None:
        with pytest.raises(ValueError, match="max_depth"):
            TemplateParser(max_depth=0)


class TestExtractPlaceholders:
    """Test extract_placeholders."""

    def test_collects_all_references(self) -> None:
        template = parse("{0} {name, bold} {n, plural, one{{x}} other{{y}}}")
        assert extract_placeholders(template) == frozenset({0, "name", "n", "x", "y"})

    def test_static_template(self) -> None:
        assert extract_placeholders(parse("plain")) == frozenset()


class TestParserProperties:
    """Property-based parser invariants."""

    @given(st.text(max_size=200))
    def test_total_and_deterministic(self, source: str) -> None:
        """Property: any string parses, and parsing twice gives equal results."""
        first = parse(source)
        second = parse(source)
        assert first == second

    @given(st.text(alphabet=st.characters(exclude_characters="{}\\#"), max_size=100))
    def test_text_without_syntax_is_one_literal(self, source: str) -> None:
        """Property: text without delimiters round-trips as literal text."""
        template = parse(source)
        assert _texts(template) == source
        assert template.is_static

    @given(st.text(alphabet="{}ab ,#\\=", max_size=60))
    def test_sequences_reference_valid_nodes(self, source: str) -> None:
        """Property: every sequence index points into the node arena."""
        template = parse(source)
        for sequence in template.sequences:
            for index in sequence:
                assert 0 <= index < len(template.nodes)
