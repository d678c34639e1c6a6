"""Validation result for raw template checks.

Splits parser diagnostics into errors and warnings so tooling can gate on
``is_valid`` while still surfacing softer findings.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .codes import Diagnostic

__all__ = ["ValidationResult"]


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of validating one raw template.

    Attributes:
        errors: Diagnostics with severity "error"
        warnings: Diagnostics with severity "warning"
    """

    errors: tuple[Diagnostic, ...] = ()
    warnings: tuple[Diagnostic, ...] = ()

    @classmethod
    def from_diagnostics(cls, diagnostics: Iterable[Diagnostic]) -> ValidationResult:
        """Partition diagnostics by severity."""
        errors: list[Diagnostic] = []
        warnings: list[Diagnostic] = []
        for diagnostic in diagnostics:
            if diagnostic.severity == "warning":
                warnings.append(diagnostic)
            else:
                errors.append(diagnostic)
        return cls(errors=tuple(errors), warnings=tuple(warnings))

    @property
    def is_valid(self) -> bool:
        """True when no error-level diagnostics were recorded."""
        return not self.errors

    @property
    def error_count(self) -> int:
        """Number of errors."""
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        """Number of warnings."""
        return len(self.warnings)

    def format(self) -> str:
        """Format every diagnostic, errors first."""
        if self.is_valid and not self.warnings:
            return "Template is valid"
        return "\n\n".join(d.format_error() for d in (*self.errors, *self.warnings))
