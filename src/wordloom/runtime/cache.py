"""Thread-safe cache of parsed templates.

Memoizes ParsedTemplate objects per (locale, key) so repeated resolutions
skip re-parsing.

Architecture:
    - Entries are tagged with the catalog version of the raw template they
      were parsed from; a version mismatch is a miss, so a reload can never
      serve a stale template even to a resolution racing the invalidation.
    - Hits read the entry map without locking.
    - Misses are single-flight per (locale, key): one thread parses while
      other threads asking for the same entry wait on that entry's gate.
      Threads building unrelated entries never wait on each other's parse.
    - Templates are published only after parsing completes.
    - invalidate(locale) swaps in a new entry map without that locale's
      partition, so readers see either the old or the new map.
    - Bounded by CacheConfig.size with oldest-insertion eviction.

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass

from wordloom.locale_utils import LocaleId
from wordloom.runtime.cache_config import CacheConfig
from wordloom.syntax import ParsedTemplate, TemplateParser

__all__ = ["TemplateCache"]

logger = logging.getLogger(__name__)

type _Slot = tuple[LocaleId, str]


@dataclass(frozen=True, slots=True)
class _Entry:
    version: int
    template: ParsedTemplate


class TemplateCache:
    """Version-aware, single-flight cache of parsed templates.

    Attributes:
        config: Cache configuration
        hits: Entries served without parsing. Incremented without locking,
            so it may undercount slightly under heavy contention.
        misses: Lookups that had to wait for or perform a build
        builds: Number of parse calls performed
    """

    __slots__ = (
        "_builds",
        "_config",
        "_entries",
        "_gates",
        "_guard",
        "_hits",
        "_misses",
        "_parser",
    )

    def __init__(self, config: CacheConfig | None = None) -> None:
        self._config = config if config is not None else CacheConfig()
        self._parser = TemplateParser(max_depth=self._config.max_depth)
        self._entries: OrderedDict[_Slot, _Entry] = OrderedDict()
        self._gates: dict[_Slot, threading.Lock] = {}
        # Guards _gates, entry publication/eviction and miss/build counters.
        # Never held while parsing.
        self._guard = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._builds = 0

    @property
    def config(self) -> CacheConfig:
        """Cache configuration."""
        return self._config

    @property
    def parser(self) -> TemplateParser:
        """Parser used for builds."""
        return self._parser

    def get_or_build(
        self, locale: LocaleId, key: str, raw: str, version: int
    ) -> ParsedTemplate:
        """Return the parsed template for (locale, key), parsing on miss.

        Args:
            locale: Locale the raw template was found under
            key: Message key
            raw: Raw template text for this version
            version: Catalog version of the raw template

        Returns:
            ParsedTemplate for exactly this raw template version
        """
        if not self._config.enabled:
            with self._guard:
                self._misses += 1
                self._builds += 1
            return self._build(locale, key, raw)

        slot = (locale, key)
        entry = self._entries.get(slot)
        if entry is not None and entry.version == version:
            self._hits += 1
            return entry.template

        with self._guard:
            self._misses += 1
            gate = self._gates.get(slot)
            if gate is None:
                gate = self._gates[slot] = threading.Lock()

        with gate:
            entry = self._entries.get(slot)
            if entry is not None and entry.version == version:
                return entry.template

            template = self._build(locale, key, raw)
            with self._guard:
                self._builds += 1
                self._publish(slot, _Entry(version, template))
                if self._gates.get(slot) is gate:
                    del self._gates[slot]
            return template

    def _build(self, locale: LocaleId, key: str, raw: str) -> ParsedTemplate:
        template = self._parser.parse(raw)
        if template.diagnostics:
            logger.warning(
                "Template %s (%s) has %d diagnostic(s)",
                key,
                locale,
                len(template.diagnostics),
            )
            for diagnostic in template.diagnostics:
                logger.debug("  - %s", diagnostic.format_error())
        else:
            logger.debug("Parsed template %s (%s)", key, locale)
        return template

    def _publish(self, slot: _Slot, entry: _Entry) -> None:
        """Insert or replace an entry. Caller holds _guard."""
        current = self._entries.get(slot)
        if current is not None:
            # A resolution still holding an older snapshot must not
            # overwrite a newer template.
            if current.version > entry.version:
                return
            self._entries[slot] = entry
            return
        while len(self._entries) >= self._config.size:
            self._entries.popitem(last=False)
        self._entries[slot] = entry

    def invalidate(self, locale: LocaleId) -> int:
        """Drop every cached template for one locale.

        Returns:
            Number of entries removed
        """
        with self._guard:
            kept = OrderedDict(
                (slot, entry) for slot, entry in self._entries.items() if slot[0] != locale
            )
            removed = len(self._entries) - len(kept)
            self._entries = kept
        logger.debug("Template cache invalidated for %s: %d entries", locale, removed)
        return removed

    def clear(self) -> None:
        """Drop every cached template and reset statistics."""
        with self._guard:
            self._entries = OrderedDict()
            self._hits = 0
            self._misses = 0
            self._builds = 0
        logger.debug("Template cache cleared")

    def get_stats(self) -> dict[str, int | float | bool]:
        """Get cache statistics.

        Returns:
            Dict with keys:
            - enabled (bool): Whether templates are memoized
            - size (int): Current number of cached templates
            - maxsize (int): Maximum cache capacity
            - hits (int): Lookups served from cache
            - misses (int): Lookups that waited for or performed a build
            - builds (int): Parse calls performed
            - hit_rate (float): Hit rate as percentage (0.0-100.0)
        """
        with self._guard:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0.0
            return {
                "enabled": self._config.enabled,
                "size": len(self._entries),
                "maxsize": self._config.size,
                "hits": self._hits,
                "misses": self._misses,
                "builds": self._builds,
                "hit_rate": round(hit_rate, 2),
            }

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, slot: object) -> bool:
        return slot in self._entries

    @property
    def hits(self) -> int:
        """Lookups served from cache."""
        return self._hits

    @property
    def misses(self) -> int:
        """Lookups that waited for or performed a build."""
        with self._guard:
            return self._misses

    @property
    def builds(self) -> int:
        """Parse calls performed."""
        with self._guard:
            return self._builds
