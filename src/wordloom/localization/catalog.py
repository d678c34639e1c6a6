"""Message catalog with atomic, copy-on-write reloads.

The catalog maps each locale to its flat key -> raw template entries. It is
never mutated in place: every load builds a new immutable CatalogSnapshot
and swaps it in, so a resolution holding a snapshot sees one consistent
catalog version for its whole lifetime.

Thread Safety:
    - Writers (load_locale, replace_locales, remove_locale, clear) are serialized by a writer
      mutex and build the next snapshot without blocking readers.
    - The swap itself happens under RWLock.write(); readers take
      RWLock.read() only long enough to fetch the current reference.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from wordloom.enums import LoadMode
from wordloom.locale_utils import LocaleId
from wordloom.localization.types import CatalogEntries, MessageKey, RawTemplate
from wordloom.runtime.rwlock import RWLock

__all__ = ["CatalogSnapshot", "LocaleEntries", "MessageCatalog", "validate_entries"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LocaleEntries:
    """Immutable entries of one locale at one version.

    Attributes:
        entries: Read-only key -> raw template mapping
        version: Catalog-wide unique version of this entry set
    """

    entries: Mapping[MessageKey, RawTemplate]
    version: int

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries


@dataclass(frozen=True, slots=True)
class CatalogSnapshot:
    """Immutable view of the whole catalog at one instant.

    Attributes:
        partitions: Read-only locale -> LocaleEntries mapping
    """

    partitions: Mapping[LocaleId, LocaleEntries]

    @property
    def locales(self) -> tuple[LocaleId, ...]:
        """Loaded locales in load order."""
        return tuple(self.partitions)

    def partition(self, locale: LocaleId) -> LocaleEntries | None:
        """Entries for one locale, or None if not loaded."""
        return self.partitions.get(locale)

    def get(self, locale: LocaleId, key: MessageKey) -> RawTemplate | None:
        """Raw template for (locale, key), or None."""
        entries = self.partitions.get(locale)
        if entries is None:
            return None
        return entries.entries.get(key)

    def lookup(
        self, key: MessageKey, chain: Iterable[LocaleId]
    ) -> tuple[LocaleId, RawTemplate, int] | None:
        """Find the first chain locale holding key.

        Returns:
            (winning locale, raw template, entry version), or None when no
            locale in the chain has the key
        """
        for locale in chain:
            entries = self.partitions.get(locale)
            if entries is None:
                continue
            raw = entries.entries.get(key)
            if raw is not None:
                return locale, raw, entries.version
        return None

    def keys(self, chain: Iterable[LocaleId]) -> frozenset[MessageKey]:
        """Union of keys over the given locales."""
        found: set[MessageKey] = set()
        for locale in chain:
            entries = self.partitions.get(locale)
            if entries is not None:
                found.update(entries.entries)
        return frozenset(found)


_EMPTY_SNAPSHOT = CatalogSnapshot(MappingProxyType({}))


def validate_entries(entries: CatalogEntries) -> dict[MessageKey, RawTemplate]:
    """Copy entries, rejecting empty or non-string keys and non-string values."""
    copied: dict[MessageKey, RawTemplate] = {}
    for key, raw in entries.items():
        if not isinstance(key, str):
            msg = f"Message keys must be str, got {type(key).__name__}"
            raise TypeError(msg)
        if not key:
            msg = "Message keys must be non-empty"
            raise ValueError(msg)
        if not isinstance(raw, str):
            msg = f"Template for key {key!r} must be str, got {type(raw).__name__}"
            raise TypeError(msg)
        copied[key] = raw
    return copied


class MessageCatalog:
    """Locale-partitioned store of raw templates.

    Example:
        >>> catalog = MessageCatalog()
        >>> catalog.load_locale("en", {"greet.hello": "Hello, {name}!"})
        1
        >>> catalog.snapshot().get(LocaleId.parse("en"), "greet.hello")
        'Hello, {name}!'

    Args:
        on_change: Called with the affected locale after every swap that
            replaces or removes that locale's entries (outside all locks)
    """

    __slots__ = ("_lock", "_on_change", "_snapshot", "_versions", "_write_mutex")

    def __init__(self, *, on_change: Callable[[LocaleId], None] | None = None) -> None:
        self._snapshot = _EMPTY_SNAPSHOT
        self._lock = RWLock()
        self._write_mutex = threading.Lock()
        self._versions = itertools.count(1)
        self._on_change = on_change

    def snapshot(self) -> CatalogSnapshot:
        """Current immutable snapshot."""
        with self._lock.read():
            return self._snapshot

    @property
    def locales(self) -> tuple[LocaleId, ...]:
        """Loaded locales in load order."""
        return self.snapshot().locales

    def version(self, locale: LocaleId | str) -> int | None:
        """Current entry version for locale, or None if not loaded."""
        entries = self.snapshot().partition(LocaleId.of(locale))
        return entries.version if entries is not None else None

    def _swap(self, partitions: dict[LocaleId, LocaleEntries]) -> None:
        """Publish a new snapshot. Caller holds _write_mutex."""
        snapshot = CatalogSnapshot(MappingProxyType(partitions))
        with self._lock.write():
            self._snapshot = snapshot

    def _notify(self, locale: LocaleId) -> None:
        if self._on_change is not None:
            self._on_change(locale)

    def load_locale(
        self,
        locale: LocaleId | str,
        entries: CatalogEntries,
        mode: LoadMode = LoadMode.REPLACE,
    ) -> int:
        """Install entries for one locale atomically.

        Args:
            locale: Target locale
            entries: Flat key -> raw template mapping (copied)
            mode: REPLACE swaps the locale's whole key set; MERGE adds or
                overwrites only the given keys

        Returns:
            Number of keys the locale holds after the load

        Raises:
            TypeError: If a key or template is not a str
            ValueError: If a key is empty or the locale tag is invalid
        """
        locale_id = LocaleId.of(locale)
        mode = LoadMode(mode)
        incoming = validate_entries(entries)

        with self._write_mutex:
            partitions = dict(self._snapshot.partitions)
            current = partitions.get(locale_id)
            if mode is LoadMode.MERGE and current is not None:
                merged = dict(current.entries)
                merged.update(incoming)
                incoming = merged
            partitions[locale_id] = LocaleEntries(
                MappingProxyType(incoming), next(self._versions)
            )
            self._swap(partitions)

        logger.info(
            "Loaded %d keys for %s (mode=%s, total=%d)",
            len(entries),
            locale_id,
            mode,
            len(incoming),
        )
        self._notify(locale_id)
        return len(incoming)

    def replace_locales(
        self, entries_by_locale: Mapping[LocaleId | str, CatalogEntries]
    ) -> dict[LocaleId, int]:
        """Replace several locales' entries in one swap.

        Readers see either every given locale at its old entries or every
        given locale at its new entries. Every mapping is validated before
        anything is installed; on error the catalog is unchanged.

        Returns:
            Key count per installed locale, in the given order

        Raises:
            TypeError: If a key or template is not a str
            ValueError: If a key is empty or a locale tag is invalid
        """
        incoming: dict[LocaleId, dict[MessageKey, RawTemplate]] = {}
        for locale, entries in entries_by_locale.items():
            incoming[LocaleId.of(locale)] = validate_entries(entries)
        if not incoming:
            return {}

        with self._write_mutex:
            partitions = dict(self._snapshot.partitions)
            for locale_id, validated in incoming.items():
                partitions[locale_id] = LocaleEntries(
                    MappingProxyType(validated), next(self._versions)
                )
            self._swap(partitions)

        counts = {locale_id: len(validated) for locale_id, validated in incoming.items()}
        logger.info(
            "Replaced %d locales in one swap: %s",
            len(counts),
            ", ".join(f"{loc}={n}" for loc, n in counts.items()),
        )
        for locale_id in counts:
            self._notify(locale_id)
        return counts

    def remove_locale(self, locale: LocaleId | str) -> bool:
        """Drop one locale's entries.

        Returns:
            True if the locale was loaded
        """
        locale_id = LocaleId.of(locale)
        with self._write_mutex:
            if locale_id not in self._snapshot.partitions:
                return False
            partitions = dict(self._snapshot.partitions)
            del partitions[locale_id]
            self._swap(partitions)

        logger.info("Removed catalog for %s", locale_id)
        self._notify(locale_id)
        return True

    def clear(self) -> None:
        """Drop every locale."""
        with self._write_mutex:
            removed = self._snapshot.locales
            self._swap({})

        logger.info("Cleared catalog (%d locales)", len(removed))
        for locale_id in removed:
            self._notify(locale_id)

    def __contains__(self, locale: object) -> bool:
        if not isinstance(locale, (LocaleId, str)):
            return False
        try:
            locale_id = LocaleId.of(locale)
        except ValueError:
            return False
        return locale_id in self.snapshot().partitions

    def __len__(self) -> int:
        return len(self.snapshot().partitions)

    def __repr__(self) -> str:
        return f"MessageCatalog(locales={[str(loc) for loc in self.locales]})"
