"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, TemplateSpan

__all__ = ["ErrorTemplate"]


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    """

    @staticmethod
    def message_not_found(key: str, chain: tuple[str, ...]) -> Diagnostic:
        """Key absent from every locale in the fallback chain.

        Args:
            key: The message key that was not found
            chain: Canonical locale codes that were searched

        Returns:
            Diagnostic for MESSAGE_NOT_FOUND
        """
        msg = f"Message '{key}' not found in locales: {', '.join(chain)}"
        return Diagnostic(
            code=DiagnosticCode.MESSAGE_NOT_FOUND,
            message=msg,
            hint="Check that the key is loaded for the requested or default locale",
            key=key,
            locale=chain[0] if chain else None,
        )

    @staticmethod
    def placeholder_not_provided(name: str | int, key: str) -> Diagnostic:
        """Template references an argument that was not supplied.

        Args:
            name: Placeholder name or positional index
            key: Message key being resolved

        Returns:
            Diagnostic for PLACEHOLDER_NOT_PROVIDED
        """
        label = f"#{name}" if isinstance(name, int) else f"'{name}'"
        msg = f"Argument {label} not provided for message '{key}'"
        return Diagnostic(
            code=DiagnosticCode.PLACEHOLDER_NOT_PROVIDED,
            message=msg,
            hint=f"Pass {label} in the resolution arguments",
            key=key,
        )

    @staticmethod
    def plural_quantity_invalid(name: str | int, value: object) -> Diagnostic:
        """Plural placeholder argument is not numeric.

        Args:
            name: Placeholder name or positional index
            value: The offending argument value

        Returns:
            Diagnostic for PLURAL_QUANTITY_INVALID (warning)
        """
        msg = f"Plural argument '{name}' is not numeric ({type(value).__name__}); using 'other'"
        return Diagnostic(
            code=DiagnosticCode.PLURAL_QUANTITY_INVALID,
            message=msg,
            hint="Pass an int, float, Decimal or numeric string",
            severity="warning",
        )

    @staticmethod
    def plural_missing_other(name: str | int, start: int, end: int) -> Diagnostic:
        """Plural placeholder does not author the mandatory 'other' branch.

        Args:
            name: Plural argument name or positional index
            start: Offset of the opening brace
            end: Offset just past the closing brace

        Returns:
            Diagnostic for PLURAL_MISSING_OTHER
        """
        msg = f"Plural placeholder '{name}' has no 'other' branch"
        return Diagnostic(
            code=DiagnosticCode.PLURAL_MISSING_OTHER,
            message=msg,
            span=TemplateSpan(start, end),
            hint="Add an other{...} branch; it is the fallback for every locale",
        )

    @staticmethod
    def nesting_depth_exceeded(max_depth: int, start: int, end: int) -> Diagnostic:
        """Plural placeholders nested deeper than the parser allows.

        Args:
            max_depth: The configured depth limit
            start: Offset of the opening brace
            end: Offset just past the closing brace

        Returns:
            Diagnostic for NESTING_DEPTH_EXCEEDED
        """
        msg = f"Plural nesting exceeds maximum depth of {max_depth}"
        return Diagnostic(
            code=DiagnosticCode.NESTING_DEPTH_EXCEEDED,
            message=msg,
            span=TemplateSpan(start, end),
            hint="Flatten the template; nested content was kept as literal text",
        )

    @staticmethod
    def load_failed(locale: str, source: str, reason: str) -> Diagnostic:
        """Loader call failed.

        Args:
            locale: Locale being loaded
            source: Loader-provided description of the source
            reason: Underlying error text

        Returns:
            Diagnostic for LOAD_FAILED
        """
        msg = f"Failed to load catalog for '{locale}' from {source}: {reason}"
        return Diagnostic(
            code=DiagnosticCode.LOAD_FAILED,
            message=msg,
            locale=locale,
        )
