"""Standalone template validation.

Checks raw templates without a catalog, for tooling such as CI checks over
translation sources. The parser never rejects input; validation reports the
diagnostics it recorded (missing 'other' branches, over-deep nesting).

Python 3.13+.
"""

from wordloom.constants import MAX_DEPTH
from wordloom.diagnostics import ValidationResult
from wordloom.syntax import TemplateParser

__all__ = ["ValidationResult", "validate_template"]


def validate_template(raw: str, *, max_depth: int = MAX_DEPTH) -> ValidationResult:
    """Validate one raw template.

    Args:
        raw: Template text
        max_depth: Maximum plural nesting depth

    Returns:
        ValidationResult; ``is_valid`` is False when the template would
        degrade to literal text somewhere

    Example:
        >>> validate_template("{n, plural, one{# item}}").is_valid
        False
        >>> validate_template("{n, plural, one{# item} other{# items}}").is_valid
        True
    """
    template = TemplateParser(max_depth=max_depth).parse(raw)
    return ValidationResult.from_diagnostics(template.diagnostics)
