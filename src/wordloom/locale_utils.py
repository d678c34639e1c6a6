"""Locale identifiers and Babel locale helpers.

Centralizes locale normalization used throughout the codebase. Every public
entry point converts incoming tags to LocaleId at the boundary, so catalog
partitions, cache keys and fallback chains all agree on one canonical form.

Python 3.13+.
"""

from __future__ import annotations

import functools
import os
import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from wordloom.constants import DEFAULT_LOCALE, MAX_LOCALE_CACHE_SIZE

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "LocaleId",
    "get_babel_locale",
    "get_system_locale",
    "normalize_locale",
]

_SUBTAG_SPLIT = re.compile(r"[-_]")


@dataclass(frozen=True, slots=True, eq=False)
class LocaleId:
    """Normalized locale identifier (language, optional script/region/variants).

    Equality and hashing are case-insensitive on the canonical POSIX-style
    string, so ``LocaleId.parse("en-us") == LocaleId.parse("EN_US")``.

    Attributes:
        language: Lowercase language subtag (e.g., "en", "zh")
        script: Title-case script subtag (e.g., "Hant") or None
        region: Uppercase region subtag (e.g., "US", "419") or None
        variants: Lowercase variant subtags, in source order

    Example:
        >>> loc = LocaleId.parse("zh-hant-tw")
        >>> str(loc)
        'zh_Hant_TW'
        >>> [str(r) for r in loc.relaxations()]
        ['zh_Hant_TW', 'zh_Hant', 'zh']
    """

    language: str
    script: str | None = None
    region: str | None = None
    variants: tuple[str, ...] = ()

    @classmethod
    def parse(cls, tag: str) -> LocaleId:
        """Parse a BCP-47 or POSIX locale tag.

        Encoding suffixes (".UTF-8") and modifiers ("@euro") are stripped.

        Args:
            tag: Locale tag such as "en-US", "pt_BR", "zh-Hant-TW"

        Returns:
            Canonical LocaleId

        Raises:
            ValueError: If the tag is empty or contains invalid subtags
        """
        if not isinstance(tag, str) or not tag.strip():
            msg = "Locale code cannot be empty"
            raise ValueError(msg)

        core = tag.strip().split(".", 1)[0].split("@", 1)[0]
        parts = _SUBTAG_SPLIT.split(core)
        if any(not part.isascii() or not part.isalnum() or len(part) > 8 for part in parts):
            msg = f"Invalid locale code format: '{tag}'"
            raise ValueError(msg)

        language, *rest = parts
        if not language.isalpha():
            msg = f"Invalid language subtag in locale code: '{tag}'"
            raise ValueError(msg)

        script: str | None = None
        region: str | None = None
        if rest and len(rest[0]) == 4 and rest[0].isalpha():
            script = rest.pop(0).title()
        if rest and (
            (len(rest[0]) == 2 and rest[0].isalpha())
            or (len(rest[0]) == 3 and rest[0].isdigit())
        ):
            region = rest.pop(0).upper()

        return cls(
            language=language.lower(),
            script=script,
            region=region,
            variants=tuple(v.lower() for v in rest),
        )

    @classmethod
    def of(cls, value: LocaleId | str) -> LocaleId:
        """Coerce a tag or an existing LocaleId to LocaleId."""
        if isinstance(value, LocaleId):
            return value
        return cls.parse(value)

    @property
    def canonical(self) -> str:
        """POSIX-style canonical string (e.g., 'en_US')."""
        parts = [self.language]
        if self.script:
            parts.append(self.script)
        if self.region:
            parts.append(self.region)
        parts.extend(self.variants)
        return "_".join(parts)

    @property
    def bcp47(self) -> str:
        """BCP-47 string (e.g., 'en-US')."""
        return self.canonical.replace("_", "-")

    @property
    def is_language_only(self) -> bool:
        """True when no script, region or variant qualifies the language."""
        return self.script is None and self.region is None and not self.variants

    def relaxations(self) -> Iterator[LocaleId]:
        """Yield this locale, then each less specific form down to the language.

        Each step drops the trailing subtag: variants first, then region,
        then script.
        """
        variants = list(self.variants)
        region = self.region
        script = self.script
        while True:
            yield LocaleId(self.language, script, region, tuple(variants))
            if variants:
                variants.pop()
            elif region is not None:
                region = None
            elif script is not None:
                script = None
            else:
                return

    def __str__(self) -> str:
        return self.canonical

    def __repr__(self) -> str:
        return f"LocaleId({self.canonical!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LocaleId):
            return NotImplemented
        return self.canonical.casefold() == other.canonical.casefold()

    def __hash__(self) -> int:
        return hash(self.canonical.casefold())


def normalize_locale(locale_code: str) -> str:
    """Convert BCP-47 locale code to canonical POSIX format.

    Example:
        >>> normalize_locale("en-us")
        'en_US'
        >>> normalize_locale("pt-BR")
        'pt_BR'
    """
    return LocaleId.parse(locale_code).canonical


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def get_babel_locale(locale_code: str) -> Locale:
    """Get a Babel Locale object with caching.

    Parses the locale code once and caches the result. This avoids repeated
    parsing overhead in hot paths like plural rule selection.

    Thread-safe via lru_cache internal locking.

    Args:
        locale_code: Locale code (BCP-47 or POSIX format accepted)

    Returns:
        Babel Locale object

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid
    """
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))


def get_system_locale(*, raise_on_failure: bool = False) -> str:
    """Detect system locale from OS and environment variables.

    Never called implicitly by the engine; hosts may use it to pick a
    default locale at startup.

    Detection order:
    1. Python locale.getlocale() (OS-level locale)
    2. LC_ALL environment variable (overrides all)
    3. LC_MESSAGES environment variable (for message catalogs)
    4. LANG environment variable (default locale)

    Args:
        raise_on_failure: If True, raise RuntimeError when locale cannot be
            determined. If False (default), return "en_US" as fallback.

    Returns:
        Detected locale code in canonical POSIX format.

    Raises:
        RuntimeError: If raise_on_failure is True and locale cannot be determined.
    """
    import locale as locale_module  # noqa: PLC0415

    try:
        system_locale, _ = locale_module.getlocale()
        if system_locale and system_locale not in ("C", "POSIX"):
            return normalize_locale(system_locale)
    except ValueError:
        pass

    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(var)
        if value and value.split(".")[0] not in ("C", "POSIX"):
            try:
                return normalize_locale(value)
            except ValueError:
                continue

    if raise_on_failure:
        msg = (
            "Could not determine system locale. "
            "Set LC_ALL, LC_MESSAGES, or LANG environment variable."
        )
        raise RuntimeError(msg)

    return DEFAULT_LOCALE
