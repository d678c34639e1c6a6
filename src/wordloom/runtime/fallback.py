"""Locale fallback chains.

A fallback chain lists the locales a lookup walks, most specific first,
always ending in the configured default locale. The chain depends only on
the requested and default locales; per-key availability is decided later,
at lookup time, so a partially translated locale still falls through key by
key without any presence index.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from threading import Lock

from wordloom.constants import MAX_LOCALE_CACHE_SIZE
from wordloom.locale_utils import LocaleId

__all__ = ["LocaleFallbackResolver", "resolve_chain"]

logger = logging.getLogger(__name__)


def resolve_chain(
    requested: LocaleId | str,
    available: Iterable[LocaleId] | None,
    default: LocaleId | str,
) -> tuple[LocaleId, ...]:
    """Compute the fallback chain for a requested locale.

    Relaxations of the requested locale are taken in order (zh_Hant_TW,
    zh_Hant, zh). Walking stops as soon as the default locale is reached,
    and the default is appended last, so the chain is never empty, never
    repeats a locale, and always ends with the default.

    Args:
        requested: Locale the caller asked for
        available: Locales currently present in the catalog. Never filters
            the chain; only used to log when no chain member is loaded.
        default: Configured default locale

    Returns:
        Ordered, duplicate-free tuple of locales

    Example:
        >>> [str(loc) for loc in resolve_chain("en-GB", None, "en_US")]
        ['en_GB', 'en', 'en_US']
        >>> [str(loc) for loc in resolve_chain("en-US", None, "en")]
        ['en_US', 'en']
    """
    requested_id = LocaleId.of(requested)
    default_id = LocaleId.of(default)

    chain: dict[LocaleId, None] = {}
    for candidate in requested_id.relaxations():
        if candidate == default_id:
            break
        chain.setdefault(candidate)
    chain.setdefault(default_id)
    result = tuple(chain)

    if available is not None:
        present = set(available)
        if not present.intersection(result):
            logger.debug(
                "No catalog loaded for any locale in chain %s",
                [str(loc) for loc in result],
            )

    return result


class LocaleFallbackResolver:
    """Memoizing fallback-chain resolver bound to one default locale.

    Chains are pure functions of (requested, default), so they can be cached
    for the lifetime of the resolver regardless of catalog reloads.

    Thread Safety:
        Lookups read a plain dict; the lock only guards insertion and
        eviction, so concurrent resolutions never wait on each other for
        already-computed chains.
    """

    __slots__ = ("_chains", "_default", "_lock", "_maxsize")

    def __init__(self, default: LocaleId | str, *, maxsize: int = MAX_LOCALE_CACHE_SIZE) -> None:
        if maxsize <= 0:
            msg = "maxsize must be positive"
            raise ValueError(msg)
        self._default = LocaleId.of(default)
        self._maxsize = maxsize
        self._chains: dict[LocaleId, tuple[LocaleId, ...]] = {}
        self._lock = Lock()

    @property
    def default(self) -> LocaleId:
        """Terminal locale of every chain."""
        return self._default

    def resolve_chain(
        self,
        requested: LocaleId | str,
        available: Iterable[LocaleId] | None = None,
    ) -> tuple[LocaleId, ...]:
        """Return the (cached) fallback chain for the requested locale."""
        requested_id = LocaleId.of(requested)
        chain = self._chains.get(requested_id)
        if chain is not None:
            return chain

        chain = resolve_chain(requested_id, available, self._default)
        with self._lock:
            if len(self._chains) >= self._maxsize:
                # Oldest insertion first
                del self._chains[next(iter(self._chains))]
            self._chains[requested_id] = chain
        return chain
