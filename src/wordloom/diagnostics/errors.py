"""wordloom exception hierarchy with structured diagnostics.

All exceptions optionally store a Diagnostic for rich error information.
Only MissingKeyError and MissingPlaceholderError ever escape a resolution,
and only when the corresponding policy selects RAISE.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .codes import Diagnostic

if TYPE_CHECKING:
    from wordloom.locale_utils import LocaleId

__all__ = [
    "CatalogLoadError",
    "MissingKeyError",
    "MissingPlaceholderError",
    "TemplateValidationError",
    "WordloomError",
]


class WordloomError(Exception):
    """Base exception for all wordloom errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize WordloomError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class MissingKeyError(WordloomError, LookupError):
    """Key absent from every locale of the fallback chain.

    Raised only under MissingKeyPolicy.RAISE.

    Attributes:
        key: The message key that was requested
        locale: The requested locale
        chain: Fallback chain that was searched
    """

    def __init__(
        self,
        message: str | Diagnostic,
        *,
        key: str,
        locale: LocaleId,
        chain: tuple[LocaleId, ...] = (),
    ) -> None:
        super().__init__(message)
        self.key = key
        self.locale = locale
        self.chain = chain


class MissingPlaceholderError(WordloomError, LookupError):
    """Template references an argument that was not supplied.

    Raised only under MissingPlaceholderPolicy.RAISE.

    Attributes:
        key: Message key being resolved
        placeholder: Missing argument name or positional index
    """

    def __init__(
        self,
        message: str | Diagnostic,
        *,
        key: str,
        placeholder: str | int,
    ) -> None:
        super().__init__(message)
        self.key = key
        self.placeholder = placeholder


class TemplateValidationError(WordloomError):
    """Raw template failed load-time validation (strict_templates only).

    Attributes:
        key: Offending message key
        locale: Locale the template was loaded for
        diagnostics: All findings recorded while parsing the template
    """

    def __init__(
        self,
        message: str | Diagnostic,
        *,
        key: str,
        locale: LocaleId,
        diagnostics: tuple[Diagnostic, ...] = (),
    ) -> None:
        super().__init__(message)
        self.key = key
        self.locale = locale
        self.diagnostics = diagnostics


class CatalogLoadError(WordloomError):
    """Loader produced a payload that cannot become catalog entries.

    Attributes:
        locale: Locale code being loaded (string form; may be invalid)
    """

    def __init__(self, message: str | Diagnostic, *, locale: str = "") -> None:
        super().__init__(message)
        self.locale = locale
