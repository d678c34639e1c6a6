"""Catalog loading infrastructure for Localization.

Provides the protocol for catalog loaders, an in-memory implementation that
flattens nested mappings, and result/summary data structures for tracking
load attempts.

Components:
    CatalogLoader - Protocol for loading one locale's entries (structural typing)
    MappingLoader - Loader over pre-decoded nested Python mappings
    flatten_entries - Nested mapping to flat dotted-key entries
    FallbackInfo - Immutable record of a locale fallback event
    LoadResult - Immutable result of a single locale load attempt
    LoadSummary - Immutable aggregate of load results

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

from wordloom.constants import LIST_JOIN_SEPARATOR
from wordloom.diagnostics import CatalogLoadError
from wordloom.enums import LoadStatus
from wordloom.locale_utils import LocaleId
from wordloom.localization.types import CatalogEntries, LocaleCode, MessageKey

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocol
    "CatalogLoader",
    # Concrete loader
    "MappingLoader",
    "flatten_entries",
    # Fallback observability
    "FallbackInfo",
    # Load result types
    "LoadResult",
    "LoadSummary",
]


class CatalogLoader(Protocol):
    """Protocol for loading catalog entries for specific locales.

    Implementations turn whatever source they read (files, a database, a
    remote service) into a flat mapping of message key to raw template.
    All I/O happens here, before entries reach the catalog.

    This is a Protocol (structural typing) rather than ABC to allow
    maximum flexibility for users implementing custom loaders.

    Example:
        >>> class JsonDirLoader:
        ...     def load(self, locale: str) -> Mapping[str, str]:
        ...         data = json.loads(Path(f"i18n/{locale}.json").read_text("utf-8"))
        ...         return flatten_entries(data, locale=locale)
        ...     def describe(self, locale: str) -> str:
        ...         return f"i18n/{locale}.json"
        ...
        >>> l10n = Localization.from_loader(JsonDirLoader(), ["en", "lv"])
    """

    def load(self, locale: LocaleCode) -> CatalogEntries:
        """Load entries for one locale.

        Args:
            locale: Locale code (e.g., 'en', 'lv_LV')

        Returns:
            Flat mapping of message key to raw template

        Raises:
            LookupError: If the source has nothing for this locale
                (FileNotFoundError counts as well)
            OSError: If the source cannot be read
            ValueError: If the source is malformed
            CatalogLoadError: If the payload cannot become catalog entries
        """

    def describe(self, locale: LocaleCode) -> str:
        """Return human-readable source description for diagnostics.

        Args:
            locale: Locale code

        Returns:
            Description used in load results and log records
        """
        return f"<{type(self).__name__}:{locale}>"


def _same_locale(left: LocaleCode, right: LocaleCode) -> bool:
    # Failed loads may record codes that do not parse
    try:
        return LocaleId.parse(left) == LocaleId.parse(right)
    except ValueError:
        return left == right


def _scalar_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _flatten_into(
    path: str,
    value: object,
    out: dict[MessageKey, str],
    locale: LocaleCode,
) -> None:
    if isinstance(value, Mapping):
        for child_key, child in value.items():
            if not isinstance(child_key, str):
                msg = (
                    f"Catalog keys must be strings, got {type(child_key).__name__} "
                    f"under {path or '<root>'!r}"
                )
                raise CatalogLoadError(msg, locale=locale)
            child_path = f"{path}.{child_key}" if path else child_key
            _flatten_into(child_path, child, out, locale)
    elif isinstance(value, (list, tuple)):
        lines: list[str] = []
        for index, item in enumerate(value):
            _flatten_into(f"{path}[{index}]", item, out, locale)
            if not isinstance(item, (Mapping, list, tuple)):
                lines.append(_scalar_text(item))
        if lines:
            out[path] = LIST_JOIN_SEPARATOR.join(lines)
    else:
        out[path] = _scalar_text(value)


def flatten_entries(
    tree: Mapping[str, object], *, locale: LocaleCode = ""
) -> dict[MessageKey, str]:
    """Flatten a nested mapping into dotted message keys.

    Rules:
    - Nested mappings join their keys with '.'
    - A list contributes 'key[i]' for each element, plus 'key' holding its
      scalar elements joined with newlines
    - None becomes an empty template; booleans become 'true'/'false';
      other scalars use str()

    Args:
        tree: Decoded nested mapping (for example, from a JSON document)
        locale: Locale code, used only in error reports

    Returns:
        Flat key to raw template dict

    Raises:
        CatalogLoadError: If tree is not a mapping or has a non-string key

    Example:
        >>> flatten_entries({"greet": {"hello": "Hi"}, "days": ["Mon", "Tue"]})
        {'greet.hello': 'Hi', 'days[0]': 'Mon', 'days[1]': 'Tue', 'days': 'Mon\\nTue'}
    """
    if not isinstance(tree, Mapping):
        msg = f"Catalog payload must be a mapping, got {type(tree).__name__}"
        raise CatalogLoadError(msg, locale=locale)
    out: dict[MessageKey, str] = {}
    _flatten_into("", tree, out, locale)
    return out


@dataclass(frozen=True, slots=True)
class MappingLoader:
    """Loader serving pre-decoded nested mappings held in memory.

    Locale codes are matched by LocaleId, so "en-US" finds a source
    registered as "en_US".

    Uses Python 3.13 frozen dataclass with slots for low memory overhead.

    Example:
        >>> loader = MappingLoader({"en": {"greet": {"hello": "Hello, {name}!"}}})
        >>> loader.load("en")
        {'greet.hello': 'Hello, {name}!'}

    Attributes:
        sources: Locale code to nested mapping
        name: Label used by describe()
    """

    sources: Mapping[LocaleCode, Mapping[str, object]]
    name: str = "memory"
    _index: dict[LocaleId, Mapping[str, object]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Index sources by LocaleId.

        Raises:
            ValueError: If a source locale code is invalid or duplicated
        """
        index: dict[LocaleId, Mapping[str, object]] = {}
        for code, tree in self.sources.items():
            locale = LocaleId.parse(code)
            if locale in index:
                msg = f"Duplicate source locale: {code!r} (same as {locale})"
                raise ValueError(msg)
            index[locale] = tree
        object.__setattr__(self, "_index", index)

    def describe(self, locale: LocaleCode) -> str:
        """Return '<name>:<locale>' for diagnostics."""
        return f"{self.name}:{locale}"

    def load(self, locale: LocaleCode) -> dict[MessageKey, str]:
        """Flatten the source registered for locale.

        Raises:
            LookupError: If no source is registered for locale
            CatalogLoadError: If the source is not a string-keyed mapping
        """
        tree = self._index.get(LocaleId.parse(locale))
        if tree is None:
            msg = f"No source for locale {locale!r} in {self.name}"
            raise LookupError(msg)
        return flatten_entries(tree, locale=locale)


@dataclass(frozen=True, slots=True)
class FallbackInfo:
    """Information about a locale fallback event.

    Provided to the on_fallback callback when Localization resolves a key
    from a locale other than the requested one.

    Attributes:
        requested_locale: The locale the caller asked for
        resolved_locale: The locale that actually contained the key
        key: The message key that was resolved

    Example:
        >>> def log_fallback(info: FallbackInfo) -> None:
        ...     print(f"Fallback: {info.key} resolved from "
        ...           f"{info.resolved_locale} (requested {info.requested_locale})")
        >>> l10n = Localization(config, on_fallback=log_fallback)
    """

    requested_locale: LocaleId
    resolved_locale: LocaleId
    key: MessageKey


@dataclass(frozen=True, slots=True)
class LoadResult:
    """Result of loading one locale through a loader.

    Attributes:
        locale: Locale code as passed to the loader
        status: Load status (success, not_found, error)
        error: Exception if status is not SUCCESS, None otherwise
        source: Loader-provided description of the source
        key_count: Number of entries loaded (0 unless successful)
    """

    locale: LocaleCode
    status: LoadStatus
    error: Exception | None = None
    source: str | None = None
    key_count: int = 0

    @property
    def is_success(self) -> bool:
        """Check if the locale loaded successfully."""
        return self.status == LoadStatus.SUCCESS

    @property
    def is_not_found(self) -> bool:
        """Check if the loader had nothing for the locale."""
        return self.status == LoadStatus.NOT_FOUND

    @property
    def is_error(self) -> bool:
        """Check if the load failed with an error."""
        return self.status == LoadStatus.ERROR


@dataclass(frozen=True, slots=True)
class LoadSummary:
    """Immutable aggregate of load results from one Localization.load call.

    All statistics are computed properties derived from the ``results``
    tuple.

    Attributes:
        results: All individual load results (immutable tuple)

    Example:
        >>> summary = l10n.load(loader, ["en", "de"])
        >>> if summary.has_errors:
        ...     for result in summary.get_errors():
        ...         print(f"Failed: {result.locale}: {result.error}")
    """

    results: tuple[LoadResult, ...]

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"LoadSummary(total={self.total_attempted}, "
            f"ok={self.successful}, "
            f"not_found={self.not_found}, "
            f"errors={self.errors})"
        )

    @property
    def total_attempted(self) -> int:
        """Total number of load attempts."""
        return len(self.results)

    @property
    def successful(self) -> int:
        """Number of successful loads."""
        return sum(1 for r in self.results if r.is_success)

    @property
    def not_found(self) -> int:
        """Number of locales the loader had nothing for."""
        return sum(1 for r in self.results if r.is_not_found)

    @property
    def errors(self) -> int:
        """Number of load errors."""
        return sum(1 for r in self.results if r.is_error)

    @property
    def key_count(self) -> int:
        """Total entries loaded across all locales."""
        return sum(r.key_count for r in self.results)

    def get_errors(self) -> tuple[LoadResult, ...]:
        """Get all results with errors."""
        return tuple(r for r in self.results if r.is_error)

    def get_not_found(self) -> tuple[LoadResult, ...]:
        """Get all results where the locale was not found."""
        return tuple(r for r in self.results if r.is_not_found)

    def get_successful(self) -> tuple[LoadResult, ...]:
        """Get all successful load results."""
        return tuple(r for r in self.results if r.is_success)

    def get_by_locale(self, locale: LocaleCode) -> tuple[LoadResult, ...]:
        """Get all results for a specific locale (matched by LocaleId)."""
        return tuple(r for r in self.results if _same_locale(r.locale, locale))

    @property
    def has_errors(self) -> bool:
        """Check if any locale failed to load with errors."""
        return self.errors > 0

    @property
    def all_successful(self) -> bool:
        """Check if every attempted locale loaded.

        Returns:
            True if errors == 0 and not_found == 0
        """
        return self.errors == 0 and self.not_found == 0
