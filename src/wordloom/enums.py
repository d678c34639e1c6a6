"""Enumerations for wordloom type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class PluralCategory(StrEnum):
    """CLDR plural category.

    StrEnum provides automatic string conversion: str(PluralCategory.ONE) == "one"
    """

    ZERO = "zero"
    ONE = "one"
    TWO = "two"
    FEW = "few"
    MANY = "many"
    OTHER = "other"
    """Universal default; every plural placeholder must author it."""


class LoadMode(StrEnum):
    """How load_locale() combines new entries with an existing locale."""

    REPLACE = "replace"
    """Atomically swap the locale's entire key set."""

    MERGE = "merge"
    """Add or overwrite only the given keys, leaving others untouched."""


class LoadStatus(StrEnum):
    """Outcome of a single loader call."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ERROR = "error"


class MissingKeyPolicy(StrEnum):
    """Behavior when a key is absent from every locale of the fallback chain."""

    RETURN_KEY = "return_key"
    """Return the key itself as a single text segment."""

    RETURN_MARKER = "return_marker"
    """Return the configured marker template formatted with key and locale."""

    RAISE = "raise"
    """Raise MissingKeyError."""


class MissingPlaceholderPolicy(StrEnum):
    """Behavior when a template references an argument that was not supplied."""

    LEAVE_DELIMITERS = "leave_delimiters"
    """Emit the placeholder source text, e.g. '{name}'."""

    SUBSTITUTE_MARKER = "substitute_marker"
    """Emit the configured marker template formatted with the name."""

    RAISE = "raise"
    """Raise MissingPlaceholderError."""


__all__ = [
    "LoadMode",
    "LoadStatus",
    "MissingKeyPolicy",
    "MissingPlaceholderPolicy",
    "PluralCategory",
]
