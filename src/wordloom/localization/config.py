"""Configuration for Localization.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from wordloom.constants import (
    DEFAULT_MISSING_KEY_MARKER,
    DEFAULT_MISSING_PLACEHOLDER_MARKER,
)
from wordloom.enums import MissingKeyPolicy, MissingPlaceholderPolicy
from wordloom.locale_utils import LocaleId
from wordloom.runtime.cache_config import CacheConfig

__all__ = ["LocalizationConfig"]


def _check_marker(marker: str, field_name: str, **sample: str) -> None:
    """Reject markers that str.format cannot fill with the given fields."""
    if not isinstance(marker, str):
        msg = f"{field_name} must be a str"
        raise TypeError(msg)
    try:
        marker.format(**sample)
    except (AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
        fields = ", ".join(f"{{{name}}}" for name in sample)
        msg = f"{field_name} may only reference {fields}: {marker!r} ({e})"
        raise ValueError(msg) from e


@dataclass(frozen=True, slots=True)
class LocalizationConfig:
    """Immutable configuration for Localization.

    Only ``default_locale`` is required. Policy fields accept either the
    enum member or its string value.

    Attributes:
        default_locale: Terminal locale of every fallback chain. A tag
            string is parsed to LocaleId.
        missing_key_policy: What resolve() returns for a key found in no
            chain locale (default: RETURN_KEY, the key itself)
        missing_key_marker: Marker for RETURN_MARKER; may reference
            {key} and {locale}
        missing_placeholder_policy: How a template placeholder without a
            matching argument renders (default: LEAVE_DELIMITERS)
        missing_placeholder_marker: Marker for SUBSTITUTE_MARKER; may
            reference {name} and {key}
        strict_templates: Reject templates with validation diagnostics at
            load time with TemplateValidationError
        cache: Template cache configuration

    Example:
        >>> config = LocalizationConfig(
        ...     default_locale="en_US",
        ...     missing_key_policy="return_marker",
        ... )
        >>> config.default_locale
        LocaleId('en_US')
    """

    default_locale: LocaleId | str
    missing_key_policy: MissingKeyPolicy = MissingKeyPolicy.RETURN_KEY
    missing_key_marker: str = DEFAULT_MISSING_KEY_MARKER
    missing_placeholder_policy: MissingPlaceholderPolicy = (
        MissingPlaceholderPolicy.LEAVE_DELIMITERS
    )
    missing_placeholder_marker: str = DEFAULT_MISSING_PLACEHOLDER_MARKER
    strict_templates: bool = False
    cache: CacheConfig = field(default_factory=CacheConfig)

    def __post_init__(self) -> None:
        """Normalize and validate configuration values at construction time.

        Raises:
            ValueError: If the locale tag, a policy value or a marker is invalid
            TypeError: If a marker is not a str or cache is not a CacheConfig
        """
        object.__setattr__(self, "default_locale", LocaleId.of(self.default_locale))
        object.__setattr__(
            self, "missing_key_policy", MissingKeyPolicy(self.missing_key_policy)
        )
        object.__setattr__(
            self,
            "missing_placeholder_policy",
            MissingPlaceholderPolicy(self.missing_placeholder_policy),
        )
        _check_marker(self.missing_key_marker, "missing_key_marker", key="k", locale="l")
        _check_marker(
            self.missing_placeholder_marker,
            "missing_placeholder_marker",
            name="n",
            key="k",
        )
        if not isinstance(self.cache, CacheConfig):
            msg = f"cache must be a CacheConfig, got {type(self.cache).__name__}"
            raise TypeError(msg)

    @property
    def locale(self) -> LocaleId:
        """default_locale as LocaleId."""
        return LocaleId.of(self.default_locale)
