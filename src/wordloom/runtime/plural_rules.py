"""CLDR plural rules implementation using Babel.

Provides plural category selection for all locales using Babel's CLDR data.
Region variants inherit their language's rule through Babel's locale
resolution; locales Babel does not know fall back to the default
"one if n == 1 else other" rule.

Python 3.13+. Depends on Babel for CLDR data.

Reference: https://www.unicode.org/cldr/charts/47/supplemental/language_plural_rules.html
"""

from __future__ import annotations

import functools
import math
from collections.abc import Callable
from decimal import Decimal, InvalidOperation

from babel.core import Locale, UnknownLocaleError
from babel.numbers import format_decimal

from wordloom.constants import MAX_LOCALE_CACHE_SIZE
from wordloom.enums import PluralCategory
from wordloom.locale_utils import LocaleId, get_babel_locale

__all__ = [
    "Quantity",
    "default_plural_rule",
    "format_quantity",
    "select_plural_category",
    "to_quantity",
]

type Quantity = int | float | Decimal


def default_plural_rule(n: Quantity) -> PluralCategory:
    """Rule for locales without CLDR data: one for 1, other otherwise."""
    return PluralCategory.ONE if abs(n) == 1 else PluralCategory.OTHER


def select_plural_category(n: Quantity, locale: LocaleId | str) -> PluralCategory:
    """Select CLDR plural category for number using Babel's CLDR data.

    Args:
        n: Number to categorize
        locale: Locale (LocaleId, or code such as "lv_LV", "en-US")

    Returns:
        Plural category

    Examples:
        >>> select_plural_category(0, "lv_LV")
        <PluralCategory.ZERO: 'zero'>
        >>> select_plural_category(1, "en_US")
        <PluralCategory.ONE: 'one'>
        >>> select_plural_category(5, "ru_RU")
        <PluralCategory.MANY: 'many'>
        >>> select_plural_category(1, "xx")
        <PluralCategory.ONE: 'one'>
    """
    babel_locale = _babel_locale_for(LocaleId.of(locale))
    if babel_locale is None:
        return default_plural_rule(n)
    rule: Callable[[Quantity], str] = babel_locale.plural_form
    return PluralCategory(rule(n))


def format_quantity(n: Quantity, locale: LocaleId | str) -> str:
    """Render a plural quantity with the locale's decimal format.

    Locales Babel does not know render with str().

    Examples:
        >>> format_quantity(1234, "en_US")
        '1,234'
        >>> format_quantity(1234, "de_DE")
        '1.234'
        >>> format_quantity(1234, "xx")
        '1234'
    """
    babel_locale = _babel_locale_for(LocaleId.of(locale))
    if babel_locale is None:
        return str(n)
    return format_decimal(n, locale=babel_locale)


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def _babel_locale_for(locale: LocaleId) -> Locale | None:
    """Find the Babel locale for the locale or its nearest known relaxation."""
    for candidate in locale.relaxations():
        try:
            return get_babel_locale(candidate.canonical)
        except (UnknownLocaleError, ValueError):
            continue
    return None


def to_quantity(value: object) -> Quantity | None:
    """Coerce a resolution argument to a plural quantity.

    int, float and Decimal pass through; numeric strings become Decimal.
    bool and everything else yield None.

    Example:
        >>> to_quantity("2.5")
        Decimal('2.5')
        >>> to_quantity(True) is None
        True
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, str):
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            return None
        return number if number.is_finite() else None
    return None
