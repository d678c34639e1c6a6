"""Diagnostic codes and data structures.

Defines error codes, template spans, and diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "TemplateSpan",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Reference errors (missing keys, placeholders)
        2000-2999: Resolution errors (runtime evaluation findings)
        3000-3999: Template errors (parser/validation findings)
        4000-4999: Loading errors (catalog ingestion)
    """

    # Reference errors (1000-1999)
    MESSAGE_NOT_FOUND = 1001
    PLACEHOLDER_NOT_PROVIDED = 1002

    # Resolution errors (2000-2999)
    PLURAL_QUANTITY_INVALID = 2001

    # Template errors (3000-3999)
    PLURAL_MISSING_OTHER = 3001
    NESTING_DEPTH_EXCEEDED = 3002

    # Loading errors (4000-4999)
    LOAD_FAILED = 4001


@dataclass(frozen=True, slots=True)
class TemplateSpan:
    """Character range inside a raw template.

    Attributes:
        start: Starting character offset (0-indexed, inclusive)
        end: Ending character offset (exclusive)
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        """Validate span invariants."""
        if self.start < 0:
            msg = f"TemplateSpan.start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"TemplateSpan.end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        span: Location inside the raw template (None for non-template errors)
        hint: Suggestion for fixing the error
        key: Message key the diagnostic concerns, if known
        locale: Locale code the diagnostic concerns, if known
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    span: TemplateSpan | None = None
    hint: str | None = None
    key: str | None = None
    locale: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic in compiler style.

        Control characters in the message are escaped so log lines cannot
        be forged through template content.

        Example output:
            error[PLURAL_MISSING_OTHER]: Plural placeholder 'count' has no 'other' branch
              --> shop.cart (en), chars 9..52
              = help: Add an other{...} branch
        """
        message = self.message.encode("unicode_escape").decode("ascii")
        parts = [f"{self.severity}[{self.code.name}]: {message}"]

        location: list[str] = []
        if self.key is not None:
            location.append(self.key if self.locale is None else f"{self.key} ({self.locale})")
        elif self.locale is not None:
            location.append(self.locale)
        if self.span is not None:
            location.append(f"chars {self.span.start}..{self.span.end}")
        if location:
            parts.append(f"  --> {', '.join(location)}")

        if self.hint:
            parts.append(f"  = help: {self.hint}")

        return "\n".join(parts)
