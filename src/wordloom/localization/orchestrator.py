"""Message resolution across locale fallback chains.

Localization ties the pieces together: a MessageCatalog of raw templates,
a LocaleFallbackResolver for chains, a TemplateCache of parsed templates
and a TemplateResolver that turns them into segments.

Key architectural decisions:
- Explicitly constructed and owned; there is no global catalog instance
- Protocol-based CatalogLoader (dependency inversion); all I/O happens in
  loaders, before entries reach the catalog
- One catalog snapshot per resolution, so a reload racing a resolution is
  never observed as a mix of old and new entries
- Availability is decided per key at lookup time, so partially translated
  locales fall through key by key

Loading Behavior:
    load() never raises for loader failures. Each locale's outcome is
    recorded in a LoadResult with status SUCCESS, NOT_FOUND or ERROR:

        summary = l10n.load(loader, ["en", "lv"])
        if summary.has_errors:
            raise RuntimeError(f"Failed to load {summary.errors} locales")

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from wordloom.constants import LOG_TRUNCATE_LENGTH
from wordloom.diagnostics import (
    CatalogLoadError,
    ErrorTemplate,
    MissingKeyError,
    TemplateValidationError,
    ValidationResult,
)
from wordloom.enums import LoadMode, LoadStatus, MissingKeyPolicy
from wordloom.locale_utils import LocaleId
from wordloom.localization.catalog import CatalogSnapshot, MessageCatalog, validate_entries
from wordloom.localization.config import LocalizationConfig
from wordloom.localization.loading import (
    CatalogLoader,
    FallbackInfo,
    LoadResult,
    LoadSummary,
)
from wordloom.runtime.cache import TemplateCache
from wordloom.runtime.fallback import LocaleFallbackResolver
from wordloom.runtime.resolver import Arguments, TemplateResolver
from wordloom.runtime.segments import FormattedMessage, TextSegment

if TYPE_CHECKING:
    from wordloom.localization.types import CatalogEntries, LocaleCode, MessageKey

__all__ = ["Localization"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _LoadCall:
    """One recorded load() call, replayed by reload()."""

    loader: CatalogLoader
    locales: tuple[LocaleCode, ...]
    mode: LoadMode


class Localization:
    """Locale-aware message resolution with fallback chains.

    Example - Direct entries:
        >>> l10n = Localization(LocalizationConfig(default_locale="en"))
        >>> l10n.load_locale("en", {"greet.hello": "Hello, {name}!"})
        1
        >>> l10n.resolve_text("greet.hello", "en-US", {"name": "Ava"})
        'Hello, Ava!'

    Example - Loader:
        >>> plural = "{n, plural, one{# message} other{# messages}}"
        >>> loader = MappingLoader({"en": {"inbox": {"count": plural}}})
        >>> l10n = Localization.from_loader(loader, ["en"])
        >>> l10n.resolve_text("inbox.count", args={"n": 3})
        '3 messages'

    Thread Safety:
        All methods may be called concurrently. Resolutions never block
        each other; loads swap in new catalog snapshots atomically.

    Args:
        config: LocalizationConfig, or just the default locale tag
        on_fallback: Optional callback invoked when a key resolves from a
            locale other than the requested one. Receives a FallbackInfo.
        catalog: Catalog to resolve from (default: a new empty catalog)
    """

    __slots__ = (
        "_cache",
        "_catalog",
        "_config",
        "_current",
        "_fallback",
        "_last_summary",
        "_load_calls",
        "_load_lock",
        "_on_fallback",
        "_resolver",
    )

    def __init__(
        self,
        config: LocalizationConfig | LocaleId | str,
        *,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
        catalog: MessageCatalog | None = None,
    ) -> None:
        if not isinstance(config, LocalizationConfig):
            config = LocalizationConfig(default_locale=config)
        self._config = config
        self._current: LocaleId = config.locale
        self._fallback = LocaleFallbackResolver(config.locale)
        self._cache = TemplateCache(config.cache)
        self._resolver = TemplateResolver(
            missing_placeholder_policy=config.missing_placeholder_policy,
            missing_placeholder_marker=config.missing_placeholder_marker,
        )
        self._on_fallback = on_fallback
        self._catalog = catalog if catalog is not None else MessageCatalog(
            on_change=self._cache.invalidate
        )
        self._load_calls: list[_LoadCall] = []
        self._last_summary = LoadSummary(())
        # Serializes load()/reload() bookkeeping; never taken by resolutions
        self._load_lock = threading.Lock()

        logger.info(
            "Localization created (default=%s, missing_key=%s, missing_placeholder=%s)",
            config.locale,
            config.missing_key_policy,
            config.missing_placeholder_policy,
        )

    @classmethod
    def from_loader(
        cls,
        loader: CatalogLoader,
        locales: Iterable[LocaleCode],
        config: LocalizationConfig | None = None,
        *,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
    ) -> Localization:
        """Create a Localization and load locales through loader.

        When config is None the first locale becomes the default locale.
        The load outcome is available from get_load_summary().

        Raises:
            ValueError: If locales is empty and no config is given
        """
        locale_list = list(locales)
        if config is None:
            if not locale_list:
                msg = "At least one locale is required"
                raise ValueError(msg)
            config = LocalizationConfig(default_locale=locale_list[0])
        l10n = cls(config, on_fallback=on_fallback)
        l10n.load(loader, locale_list)
        return l10n

    # ------------------------------------------------------------------
    # Properties

    @property
    def config(self) -> LocalizationConfig:
        """Active configuration."""
        return self._config

    @property
    def default_locale(self) -> LocaleId:
        """Terminal locale of every fallback chain."""
        return self._config.locale

    @property
    def current_locale(self) -> LocaleId:
        """Locale used when resolve() is called without one."""
        return self._current

    def set_current_locale(self, locale: LocaleId | str) -> None:
        """Change the locale used when resolve() is called without one.

        Raises:
            ValueError: If the locale tag is invalid
        """
        self._current = LocaleId.of(locale)
        logger.debug("Current locale set to %s", self._current)

    @property
    def catalog(self) -> MessageCatalog:
        """Underlying message catalog."""
        return self._catalog

    @property
    def locales(self) -> tuple[LocaleId, ...]:
        """Loaded locales in load order."""
        return self._catalog.locales

    # ------------------------------------------------------------------
    # Loading

    def load_locale(
        self,
        locale: LocaleId | LocaleCode,
        entries: CatalogEntries,
        mode: LoadMode = LoadMode.REPLACE,
    ) -> int:
        """Install entries for one locale atomically.

        Args:
            locale: Target locale
            entries: Flat key -> raw template mapping
            mode: REPLACE (whole key set) or MERGE (given keys only)

        Returns:
            Number of keys the locale holds after the load

        Raises:
            TemplateValidationError: If strict_templates is set and a
                template has validation diagnostics (nothing is loaded)
            TypeError: If a key or template is not a str
            ValueError: If a key is empty or the locale tag is invalid
        """
        locale_id = LocaleId.of(locale)
        if self._config.strict_templates:
            self._check_templates(locale_id, entries)
        return self._catalog.load_locale(locale_id, entries, mode)

    def _check_templates(self, locale: LocaleId, entries: CatalogEntries) -> None:
        parser = self._cache.parser
        for key, raw in entries.items():
            if not isinstance(raw, str):
                # Left for the catalog's type check
                continue
            template = parser.parse(raw)
            if template.diagnostics:
                first = template.diagnostics[0]
                raise TemplateValidationError(
                    first,
                    key=key,
                    locale=locale,
                    diagnostics=template.diagnostics,
                )

    def remove_locale(self, locale: LocaleId | LocaleCode) -> bool:
        """Drop one locale's entries and cached templates."""
        return self._catalog.remove_locale(locale)

    def load(
        self,
        loader: CatalogLoader,
        locales: Iterable[LocaleCode],
        mode: LoadMode = LoadMode.REPLACE,
    ) -> LoadSummary:
        """Load locales through a loader and remember the call for reload().

        Loader failures never raise; each locale's outcome is recorded:
        - SUCCESS: entries installed
        - NOT_FOUND: loader raised LookupError or FileNotFoundError
        - ERROR: loader raised OSError, ValueError, TypeError or
          CatalogLoadError, or strict template validation failed

        Returns:
            LoadSummary for this call
        """
        call = _LoadCall(loader, tuple(locales), LoadMode(mode))
        with self._load_lock:
            self._load_calls.append(call)
            results = tuple(
                self._load_one(loader, locale, call.mode) for locale in call.locales
            )
            summary = LoadSummary(results)
            self._last_summary = summary
        logger.info("Load finished: %r", summary)
        return summary

    @staticmethod
    def _fetch(
        loader: CatalogLoader, locale: LocaleCode, source: str
    ) -> CatalogEntries | LoadResult:
        """Call the loader; return its entries, or the failed LoadResult."""
        try:
            return loader.load(locale)
        except (FileNotFoundError, LookupError) as e:
            logger.warning("No catalog for %r at %s", locale[:LOG_TRUNCATE_LENGTH], source)
            return LoadResult(locale, LoadStatus.NOT_FOUND, error=e, source=source)
        except (OSError, ValueError, TypeError, CatalogLoadError) as e:
            diagnostic = ErrorTemplate.load_failed(locale, source, str(e))
            logger.warning("%s", diagnostic.message)
            return LoadResult(locale, LoadStatus.ERROR, error=e, source=source)

    def _load_one(self, loader: CatalogLoader, locale: LocaleCode, mode: LoadMode) -> LoadResult:
        source = loader.describe(locale)
        entries = self._fetch(loader, locale, source)
        if isinstance(entries, LoadResult):
            return entries
        try:
            count = self.load_locale(locale, entries, mode)
        except (ValueError, TypeError, TemplateValidationError) as e:
            logger.warning(
                "Rejected catalog for %r from %s: %s", locale[:LOG_TRUNCATE_LENGTH], source, e
            )
            return LoadResult(locale, LoadStatus.ERROR, error=e, source=source)
        return LoadResult(locale, LoadStatus.SUCCESS, source=source, key_count=count)

    def reload(self) -> LoadSummary:
        """Replay every recorded load() call.

        Entries are gathered per locale across all recorded calls first (a
        REPLACE call resets what earlier calls gathered for that locale, a
        MERGE call adds to it). Every locale that loaded at least once and
        passes validation is then replaced in one catalog swap, so readers see
        either all old or all new entries. Locales whose loads all failed, or
        whose entries were rejected, keep their current entries.
        Locales installed directly through load_locale() are untouched.

        Returns:
            LoadSummary with one result per replayed (call, locale)
        """
        with self._load_lock:
            calls = tuple(self._load_calls)
            gathered: dict[LocaleId, dict[MessageKey, str]] = {}
            origin: dict[LocaleId, tuple[LocaleCode, str]] = {}
            results: list[LoadResult] = []

            for call in calls:
                for locale in call.locales:
                    source = call.loader.describe(locale)
                    entries = self._fetch(call.loader, locale, source)
                    if isinstance(entries, LoadResult):
                        results.append(entries)
                        continue
                    try:
                        locale_id = LocaleId.parse(locale)
                    except ValueError as e:
                        results.append(LoadResult(locale, LoadStatus.ERROR, error=e, source=source))
                        continue
                    bucket = gathered.get(locale_id)
                    if bucket is None or call.mode is LoadMode.REPLACE:
                        bucket = gathered[locale_id] = {}
                    bucket.update(entries)
                    origin[locale_id] = (locale, source)
                    results.append(
                        LoadResult(
                            locale, LoadStatus.SUCCESS, source=source, key_count=len(entries)
                        )
                    )

            accepted: dict[LocaleId, dict[MessageKey, str]] = {}
            for locale_id, entries in gathered.items():
                code, source = origin[locale_id]
                try:
                    validated = validate_entries(entries)
                    if self._config.strict_templates:
                        self._check_templates(locale_id, validated)
                except (ValueError, TypeError, TemplateValidationError) as e:
                    logger.warning(
                        "Rejected reloaded catalog for %s from %s: %s", locale_id, source, e
                    )
                    results.append(LoadResult(code, LoadStatus.ERROR, error=e, source=source))
                    continue
                accepted[locale_id] = validated
            self._catalog.replace_locales(accepted)

            summary = LoadSummary(tuple(results))
            self._last_summary = summary
        logger.info("Reload finished: %r", summary)
        return summary

    def get_load_summary(self) -> LoadSummary:
        """Summary of the most recent load() or reload() call."""
        return self._last_summary

    # ------------------------------------------------------------------
    # Resolution

    def _requested(self, locale: LocaleId | LocaleCode | None) -> LocaleId:
        return self._current if locale is None else LocaleId.of(locale)

    @staticmethod
    def _check_key(key: MessageKey) -> None:
        if not isinstance(key, str) or not key:
            msg = "Message key must be a non-empty str"
            raise ValueError(msg)

    def _report_fallback(self, requested: LocaleId, winner: LocaleId, key: MessageKey) -> None:
        if winner == requested:
            return
        logger.debug(
            "Key %r resolved from %s (requested %s)",
            key[:LOG_TRUNCATE_LENGTH],
            winner,
            requested,
        )
        if self._on_fallback is not None:
            self._on_fallback(FallbackInfo(requested, winner, key))

    def _missing_key(
        self,
        key: MessageKey,
        requested: LocaleId,
        chain: tuple[LocaleId, ...],
        fallback: str | None,
    ) -> FormattedMessage:
        if fallback is not None:
            text = fallback
        else:
            policy = self._config.missing_key_policy
            if policy is MissingKeyPolicy.RAISE:
                diagnostic = ErrorTemplate.message_not_found(
                    key, tuple(loc.canonical for loc in chain)
                )
                raise MissingKeyError(diagnostic, key=key, locale=requested, chain=chain)
            if policy is MissingKeyPolicy.RETURN_MARKER:
                marker = self._config.missing_key_marker
                text = marker.format(key=key, locale=requested.canonical)
            else:
                text = key

        logger.warning(
            "Key %r not found in %s",
            key[:LOG_TRUNCATE_LENGTH],
            [loc.canonical for loc in chain],
        )
        segments = (TextSegment(text),) if text else ()
        return FormattedMessage(segments, None)

    def _resolve_in(
        self,
        snapshot: CatalogSnapshot,
        key: MessageKey,
        requested: LocaleId,
        chain: tuple[LocaleId, ...],
        args: Arguments | None,
        fallback: str | None,
    ) -> FormattedMessage:
        hit = snapshot.lookup(key, chain)
        if hit is None:
            return self._missing_key(key, requested, chain, fallback)
        winner, raw, version = hit
        self._report_fallback(requested, winner, key)
        template = self._cache.get_or_build(winner, key, raw, version)
        return self._resolver.resolve(template, key=key, locale=winner, args=args)

    def resolve(
        self,
        key: MessageKey,
        locale: LocaleId | LocaleCode | None = None,
        args: Arguments | None = None,
        *,
        fallback: str | None = None,
    ) -> FormattedMessage:
        """Resolve a message to formatted segments.

        Walks the fallback chain of the requested locale against one catalog
        snapshot; the first locale holding key wins and supplies both the
        template and the plural rules.

        Args:
            key: Message key
            locale: Requested locale (default: current_locale)
            args: Mapping of argument name/index to value, or a sequence of
                positional values
            fallback: Text returned when no chain locale has key; overrides
                the missing-key policy for this call

        Returns:
            FormattedMessage; ``.locale`` is the winning locale, or None when
            the key was missing

        Raises:
            MissingKeyError: Key missing, no fallback, policy RAISE
            MissingPlaceholderError: Argument missing, placeholder policy RAISE
            ValueError: If key is empty or the locale tag is invalid
        """
        self._check_key(key)
        requested = self._requested(locale)
        chain = self._fallback.resolve_chain(requested)
        snapshot = self._catalog.snapshot()
        return self._resolve_in(snapshot, key, requested, chain, args, fallback)

    def resolve_text(
        self,
        key: MessageKey,
        locale: LocaleId | LocaleCode | None = None,
        args: Arguments | None = None,
        *,
        fallback: str | None = None,
    ) -> str:
        """Resolve a message to plain text. See resolve()."""
        return self.resolve(key, locale, args, fallback=fallback).text

    def resolve_list(
        self,
        key: MessageKey,
        locale: LocaleId | LocaleCode | None = None,
        args: Arguments | None = None,
    ) -> tuple[FormattedMessage, ...]:
        """Resolve a list-valued entry ('key[0]', 'key[1]', ...).

        The locale that holds 'key[0]' supplies every element, so a list is
        never stitched together from several locales. Without indexed
        entries, the result is a 1-tuple of resolve(key).

        Returns:
            One FormattedMessage per element, in index order
        """
        self._check_key(key)
        requested = self._requested(locale)
        chain = self._fallback.resolve_chain(requested)
        snapshot = self._catalog.snapshot()

        first = snapshot.lookup(f"{key}[0]", chain)
        if first is None:
            return (self._resolve_in(snapshot, key, requested, chain, args, None),)

        winner, _, version = first
        entries = snapshot.partitions[winner]
        self._report_fallback(requested, winner, key)

        messages: list[FormattedMessage] = []
        index = 0
        while (raw := entries.entries.get(f"{key}[{index}]")) is not None:
            item_key = f"{key}[{index}]"
            template = self._cache.get_or_build(winner, item_key, raw, version)
            messages.append(
                self._resolver.resolve(template, key=item_key, locale=winner, args=args)
            )
            index += 1
        return tuple(messages)

    # ------------------------------------------------------------------
    # Introspection

    def has_key(self, key: MessageKey, locale: LocaleId | LocaleCode | None = None) -> bool:
        """Check whether any locale in the chain holds key."""
        chain = self._fallback.resolve_chain(self._requested(locale))
        return self._catalog.snapshot().lookup(key, chain) is not None

    def get_keys(self, locale: LocaleId | LocaleCode | None = None) -> frozenset[MessageKey]:
        """Union of keys resolvable for locale across its fallback chain."""
        chain = self._fallback.resolve_chain(self._requested(locale))
        return self._catalog.snapshot().keys(chain)

    def fallback_chain(self, locale: LocaleId | LocaleCode | None = None) -> tuple[LocaleId, ...]:
        """Fallback chain used for locale."""
        return self._fallback.resolve_chain(self._requested(locale), self._catalog.locales)

    def validate_locale(self, locale: LocaleId | LocaleCode) -> dict[MessageKey, ValidationResult]:
        """Validate every template loaded for one locale.

        Returns:
            Key -> ValidationResult for templates with diagnostics only;
            empty when every template is clean or the locale is not loaded
        """
        entries = self._catalog.snapshot().partition(LocaleId.of(locale))
        if entries is None:
            return {}
        parser = self._cache.parser
        findings: dict[MessageKey, ValidationResult] = {}
        for key, raw in entries.entries.items():
            template = parser.parse(raw)
            if template.diagnostics:
                findings[key] = ValidationResult.from_diagnostics(template.diagnostics)
        return findings

    def get_cache_stats(self) -> dict[str, int | float | bool]:
        """Template cache statistics. See TemplateCache.get_stats()."""
        return self._cache.get_stats()

    def clear_cache(self) -> None:
        """Drop every parsed template."""
        self._cache.clear()

    def __repr__(self) -> str:
        return (
            f"Localization(default={self.default_locale}, "
            f"current={self._current}, locales={[str(loc) for loc in self.locales]})"
        )
