"""Localization Example - Multi-Locale Fallback Chains.

Demonstrates real-world usage of Localization for handling incomplete
translations and locale fallback chains.

Scenarios covered:
1. E-commerce site with partial Latvian translations
2. Regional variants falling back to their language
3. Disk-based JSON catalogs through a custom loader
4. Observing fallbacks

Python 3.13+.
"""

from __future__ import annotations

import json
import tempfile
from collections.abc import Mapping
from pathlib import Path

from wordloom import Localization, LocalizationConfig, MissingKeyPolicy
from wordloom.localization import FallbackInfo, flatten_entries


def example_1_basic_fallback() -> None:
    """Example 1: Basic fallback (lv -> en)."""
    print("=" * 60)
    print("Example 1: Basic Fallback (lv -> en)")
    print("=" * 60)

    l10n = Localization("en")

    # Latvian translations (incomplete)
    l10n.load_locale(
        "lv",
        {
            "welcome": "Sveiki, {name}!",
            "cart": "Grozs",
            "cart.items": "{n, plural, zero{# preču} one{# prece} other{# preces}}",
        },
    )

    # English translations (complete)
    l10n.load_locale(
        "en",
        {
            "welcome": "Hello, {name}!",
            "cart": "Cart",
            "cart.items": "{n, plural, one{# item} other{# items}}",
            "payment.success": "Payment successful!",
            "payment.error": "Payment failed: {reason}",
        },
    )

    print("\nMessages in Latvian:")
    print(f"  welcome: {l10n.resolve_text('welcome', 'lv', {'name': 'Anna'})}")
    for n in (0, 1, 21, 5):
        print(f"  cart.items({n}): {l10n.resolve_text('cart.items', 'lv', {'n': n})}")

    print("\nMessages falling back to English:")
    print(f"  payment.success: {l10n.resolve_text('payment.success', 'lv')}")
    result = l10n.resolve("payment.error", "lv", {"reason": "Invalid card"})
    print(f"  payment.error: {result.text} (from {result.locale})")

    print("\nNon-existent message (key returned as text):")
    print(f"  nonexistent: {l10n.resolve_text('nonexistent', 'lv')}")


def example_2_regional_variants() -> None:
    """Example 2: Regional variants relax to their language."""
    print("\n" + "=" * 60)
    print("Example 2: Regional Variants (pt_BR -> pt -> en)")
    print("=" * 60)

    config = LocalizationConfig(
        default_locale="en",
        missing_key_policy=MissingKeyPolicy.RETURN_MARKER,
    )
    l10n = Localization(config)
    l10n.load_locale("pt_BR", {"bus": "ônibus"})
    l10n.load_locale("pt", {"bus": "autocarro", "train": "comboio"})
    l10n.load_locale("en", {"bus": "bus", "train": "train", "tram": "tram"})

    print(f"\nChain for pt-BR: {[str(loc) for loc in l10n.fallback_chain('pt-BR')]}")
    for key in ("bus", "train", "tram", "ferry"):
        print(f"  {key}: {l10n.resolve_text(key, 'pt-BR')}")


class JsonDirLoader:
    """Loads '<root>/<locale>.json' files and flattens them to dotted keys."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def load(self, locale: str) -> Mapping[str, str]:
        path = self.root / f"{locale}.json"
        data = json.loads(path.read_text(encoding="utf-8"))
        return flatten_entries(data, locale=locale)

    def describe(self, locale: str) -> str:
        return str(self.root / f"{locale}.json")


def example_3_disk_based_catalogs(tmp_path: Path | None = None) -> None:
    """Example 3: Loading JSON catalogs from disk with a custom loader."""
    print("\n" + "=" * 60)
    print("Example 3: Disk-Based Catalogs")
    print("=" * 60)

    if tmp_path is None:
        tmp_path = Path(tempfile.mkdtemp())

    (tmp_path / "en.json").write_text(
        json.dumps({
            "ui": {"hello": "Hello!", "welcome": "Welcome to our app!"},
            "errors": {"404": "Page not found", "500": "Internal server error"},
            "tips": ["Save often", "Use shortcuts"],
        }),
        encoding="utf-8",
    )
    (tmp_path / "lv.json").write_text(
        json.dumps({"ui": {"hello": "Sveiki!"}}),
        encoding="utf-8",
    )
    # No de.json: reported as NOT_FOUND, never raised

    loader = JsonDirLoader(tmp_path)
    l10n = Localization.from_loader(loader, ["en", "lv", "de"])

    summary = l10n.get_load_summary()
    print(f"\nLoad summary: {summary!r}")
    for result in summary.get_not_found():
        print(f"  not found: {result.locale} ({result.source})")

    print("\nUI messages (from lv.json):")
    print(f"  ui.hello: {l10n.resolve_text('ui.hello', 'lv')}")

    print("\nError messages (fallback to en.json):")
    print(f"  errors.404: {l10n.resolve_text('errors.404', 'lv')}")

    print("\nList entries:")
    for item in l10n.resolve_list("tips", "lv"):
        print(f"  - {item}")

    # Translators update lv.json; reload swaps it in atomically
    (tmp_path / "lv.json").write_text(
        json.dumps({"ui": {"hello": "Sveiki!", "welcome": "Laipni lūdzam!"}}),
        encoding="utf-8",
    )
    l10n.reload()
    print(f"\nAfter reload, ui.welcome: {l10n.resolve_text('ui.welcome', 'lv')}")


def example_4_fallback_observability() -> None:
    """Example 4: Tracking which keys are missing translations."""
    print("\n" + "=" * 60)
    print("Example 4: Fallback Observability")
    print("=" * 60)

    missing: set[tuple[str, str]] = set()

    def on_fallback(info: FallbackInfo) -> None:
        missing.add((str(info.requested_locale), info.key))

    l10n = Localization("en", on_fallback=on_fallback)
    l10n.load_locale("en", {"home": "Home", "about": "About us", "contact": "Contact"})
    l10n.load_locale("lt", {"home": "Namai"})

    for key in ("home", "about", "contact"):
        l10n.resolve(key, "lt")

    print("\nKeys served from a fallback locale:")
    for locale, key in sorted(missing):
        print(f"  {locale}: {key}")


if __name__ == "__main__":
    example_1_basic_fallback()
    example_2_regional_variants()
    example_3_disk_based_catalogs()
    example_4_fallback_observability()
