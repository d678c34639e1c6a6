"""Tests for diagnostics, error types and template validation."""

import pytest

from wordloom import (
    MissingKeyError,
    TemplateValidationError,
    WordloomError,
    validate_template,
)
from wordloom.diagnostics import (
    Diagnostic,
    DiagnosticCode,
    ErrorTemplate,
    TemplateSpan,
    ValidationResult,
)
from wordloom.locale_utils import LocaleId


class TestTemplateSpan:
    """Span invariants."""

    def test_valid(self) -> None:
        assert TemplateSpan(2, 5).end == 5

    def test_negative_start(self) -> None:
        with pytest.raises(ValueError, match="start"):
            TemplateSpan(-1, 3)

    def test_end_before_start(self) -> None:
        with pytest.raises(ValueError, match="end"):
            TemplateSpan(4, 3)


class TestDiagnosticFormatting:
    """format_error output."""

    def test_full_format(self) -> None:
        diagnostic = Diagnostic(
            code=DiagnosticCode.PLURAL_MISSING_OTHER,
            message="Plural placeholder 'count' has no 'other' branch",
            span=TemplateSpan(9, 40),
            hint="Add an other{...} branch",
            key="shop.cart",
            locale="en",
        )
        assert diagnostic.format_error() == (
            "error[PLURAL_MISSING_OTHER]: Plural placeholder 'count' has no 'other' branch\n"
            "  --> shop.cart (en), chars 9..40\n"
            "  = help: Add an other{...} branch"
        )

    def test_control_characters_escaped(self) -> None:
        diagnostic = Diagnostic(DiagnosticCode.LOAD_FAILED, "line1\nFAKE: line2")
        assert "\n" not in diagnostic.format_error()

    def test_str_is_message(self) -> None:
        assert str(ErrorTemplate.message_not_found("k", ("en",))) == (
            "Message 'k' not found in locales: en"
        )


class TestErrorTemplates:
    """Factories return coded diagnostics."""

    def test_placeholder_labels(self) -> None:
        named = ErrorTemplate.placeholder_not_provided("name", "k")
        positional = ErrorTemplate.placeholder_not_provided(0, "k")
        assert "'name'" in named.message
        assert "#0" in positional.message

    def test_plural_quantity_is_warning(self) -> None:
        diagnostic = ErrorTemplate.plural_quantity_invalid("n", "many")
        assert diagnostic.severity == "warning"
        assert diagnostic.code is DiagnosticCode.PLURAL_QUANTITY_INVALID

    def test_missing_other_span(self) -> None:
        diagnostic = ErrorTemplate.plural_missing_other("n", 3, 10)
        assert diagnostic.span == TemplateSpan(3, 10)


class TestErrors:
    """Exception hierarchy."""

    def test_from_diagnostic(self) -> None:
        diagnostic = ErrorTemplate.message_not_found("k", ("lv", "en"))
        error = MissingKeyError(diagnostic, key="k", locale=LocaleId.parse("lv"))
        assert error.diagnostic is diagnostic
        assert str(error) == diagnostic.format_error()
        assert isinstance(error, WordloomError)

    def test_from_string(self) -> None:
        error = TemplateValidationError("bad", key="k", locale=LocaleId.parse("en"))
        assert error.diagnostic is None
        assert str(error) == "bad"
        assert error.diagnostics == ()


class TestValidateTemplate:
    """Standalone validation."""

    def test_valid(self) -> None:
        result = validate_template("{n, plural, one{# item} other{# items}}")
        assert result.is_valid
        assert result.format() == "Template is valid"

    def test_missing_other(self) -> None:
        result = validate_template("{n, plural, one{# item}}")
        assert not result.is_valid
        assert result.error_count == 1
        assert "PLURAL_MISSING_OTHER" in result.format()

    def test_depth_limit(self) -> None:
        result = validate_template("{a, plural, other{{b, plural, other{x}}}}", max_depth=1)
        assert [d.code for d in result.errors] == [DiagnosticCode.NESTING_DEPTH_EXCEEDED]

    def test_partition_by_severity(self) -> None:
        result = ValidationResult.from_diagnostics([
            ErrorTemplate.plural_quantity_invalid("n", None),
            ErrorTemplate.plural_missing_other("n", 0, 5),
        ])
        assert result.warning_count == 1
        assert result.error_count == 1
        assert not result.is_valid
