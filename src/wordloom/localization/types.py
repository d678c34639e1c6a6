"""Type aliases for the localization domain.

Provides semantic type aliases used throughout the localization package
and by user code when annotating Localization call sites.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Mapping

__all__ = [
    "CatalogEntries",
    "LocaleCode",
    "MessageKey",
    "RawTemplate",
]

type MessageKey = str
"""Dotted message key (e.g., 'greet.hello', 'errors.not_found')."""

type LocaleCode = str
"""BCP-47 or POSIX locale code (e.g., 'en', 'en-US', 'zh_Hant_TW')."""

type RawTemplate = str
"""Unparsed template text as authored."""

type CatalogEntries = Mapping[MessageKey, RawTemplate]
"""Flat key to raw template mapping for one locale."""
