"""Shared constants for wordloom.

This module provides centralized configuration constants used across
syntax, runtime and localization packages. Placing constants here avoids
circular imports and provides a single source of truth.

Constants are grouped by domain:
- Depth limits: Recursion protection for template parsing
- Cache limits: Memory bounds for caching subsystems
- Fallback strings: Default markers for missing keys and placeholders
- Template syntax: Delimiters recognized by the placeholder parser
- Logging: Truncation bound for user content quoted in log messages

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Depth limits
    "MAX_DEPTH",
    # Cache limits
    "MAX_LOCALE_CACHE_SIZE",
    "DEFAULT_CACHE_SIZE",
    # Fallback strings
    "DEFAULT_MISSING_KEY_MARKER",
    "DEFAULT_MISSING_PLACEHOLDER_MARKER",
    # Template syntax
    "PLACEHOLDER_OPEN",
    "PLACEHOLDER_CLOSE",
    "ESCAPE_CHAR",
    "QUANTITY_CHAR",
    "DIRECTIVE_SEPARATOR",
    "PLURAL_KEYWORD",
    "PLURAL_OTHER",
    # Logging
    "LOG_TRUNCATE_LENGTH",
    # Defaults
    "DEFAULT_LOCALE",
    "LIST_JOIN_SEPARATOR",
]

# ============================================================================
# DEPTH LIMITS
# ============================================================================

# Maximum nesting of plural placeholders inside plural branches.
# Templates nested this deep are malformed; the parser keeps the excess
# content as literal text and records a diagnostic.
MAX_DEPTH: int = 100

# ============================================================================
# CACHE LIMITS
# ============================================================================

# Maximum cached Babel Locale instances (locale_utils.get_babel_locale).
# 128 covers typical multi-region applications (major locales + variants).
MAX_LOCALE_CACHE_SIZE: int = 128

# Default maximum parsed-template cache entries.
# Sized for a few thousand messages across a handful of locales.
DEFAULT_CACHE_SIZE: int = 10000

# ============================================================================
# FALLBACK STRINGS
# ============================================================================

# Format strings; use .format(key=..., locale=...) / .format(name=...)
DEFAULT_MISSING_KEY_MARKER: str = "??{key}??"  # e.g., ??greet.hello??
DEFAULT_MISSING_PLACEHOLDER_MARKER: str = "<?{name}?>"  # e.g., <?username?>

# ============================================================================
# TEMPLATE SYNTAX
# ============================================================================

PLACEHOLDER_OPEN: str = "{"
PLACEHOLDER_CLOSE: str = "}"
ESCAPE_CHAR: str = "\\"
QUANTITY_CHAR: str = "#"  # Only meaningful inside plural branches
DIRECTIVE_SEPARATOR: str = ","
PLURAL_KEYWORD: str = "plural"
PLURAL_OTHER: str = "other"

# ============================================================================
# LOGGING
# ============================================================================

# Log-injection guard: user-supplied content is truncated and repr()-quoted
LOG_TRUNCATE_LENGTH: int = 100

# ============================================================================
# DEFAULTS
# ============================================================================

DEFAULT_LOCALE: str = "en_US"

# List-valued entries are also exposed as one template joined by newlines
LIST_JOIN_SEPARATOR: str = "\n"
