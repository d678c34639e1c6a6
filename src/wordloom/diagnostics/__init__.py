"""Diagnostic system for wordloom errors.

Provides structured error diagnostics with codes, template spans and hints.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, TemplateSpan
from .errors import (
    CatalogLoadError,
    MissingKeyError,
    MissingPlaceholderError,
    TemplateValidationError,
    WordloomError,
)
from .templates import ErrorTemplate
from .validation import ValidationResult

__all__ = [
    "CatalogLoadError",
    "Diagnostic",
    "DiagnosticCode",
    "ErrorTemplate",
    "MissingKeyError",
    "MissingPlaceholderError",
    "TemplateSpan",
    "TemplateValidationError",
    "ValidationResult",
    "WordloomError",
]
