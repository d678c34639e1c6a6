"""Tests for fallback chain computation.

Verifies:
- Relaxation order for region and script subtags
- The default locale always terminates the chain
- No duplicates
- Memoization in LocaleFallbackResolver
"""

import logging

import pytest
from hypothesis import given
from hypothesis import strategies as st

from wordloom.locale_utils import LocaleId
from wordloom.runtime.fallback import LocaleFallbackResolver, resolve_chain


def _codes(chain: tuple[LocaleId, ...]) -> list[str]:
    return [str(loc) for loc in chain]


class TestResolveChain:
    """Test resolve_chain ordering."""

    def test_region_then_language_then_default(self) -> None:
        assert _codes(resolve_chain("en-GB", None, "en_US")) == ["en_GB", "en", "en_US"]

    def test_truncated_at_default(self) -> None:
        assert _codes(resolve_chain("en-US", None, "en")) == ["en_US", "en"]

    def test_requested_is_default(self) -> None:
        assert _codes(resolve_chain("en", None, "en")) == ["en"]

    def test_unrelated_language(self) -> None:
        assert _codes(resolve_chain("lv_LV", None, "en")) == ["lv_LV", "lv", "en"]

    def test_script_relaxation(self) -> None:
        chain = resolve_chain("zh-Hant-TW", None, "en")
        assert _codes(chain) == ["zh_Hant_TW", "zh_Hant", "zh", "en"]

    def test_accepts_locale_ids(self) -> None:
        chain = resolve_chain(LocaleId.parse("de-AT"), None, LocaleId.parse("de"))
        assert _codes(chain) == ["de_AT", "de"]

    def test_available_never_filters(self) -> None:
        chain = resolve_chain("fr_CA", [LocaleId.parse("en")], "en")
        assert _codes(chain) == ["fr_CA", "fr", "en"]

    def test_logs_when_nothing_loaded(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="wordloom.runtime.fallback"):
            resolve_chain("fr", [LocaleId.parse("de")], "en")
        assert any("No catalog loaded" in record.message for record in caplog.records)

    def test_invalid_requested_raises(self) -> None:
        with pytest.raises(ValueError, match="[Ll]ocale"):
            resolve_chain("not a locale", None, "en")


class TestResolveChainProperties:
    """Property-based chain invariants."""

    @given(
        language=st.sampled_from(["en", "de", "zh", "lv", "pt"]),
        script=st.sampled_from([None, "Latn", "Hant"]),
        region=st.sampled_from([None, "US", "BR", "LV", "TW"]),
        default=st.sampled_from(["en", "en_US", "de", "lv_LV", "zh_Hant"]),
    )
    def test_chain_shape(
        self, language: str, script: str | None, region: str | None, default: str
    ) -> None:
        """Property: starts with requested unless it is default, ends with default, no repeats."""
        requested = LocaleId(language, script, region)
        default_id = LocaleId.parse(default)
        chain = resolve_chain(requested, None, default_id)

        assert chain[-1] == default_id
        assert chain[0] == requested
        assert len(chain) == len(set(chain))
        assert chain.count(default_id) == 1


class TestLocaleFallbackResolver:
    """Test the memoizing resolver."""

    def test_default_property(self) -> None:
        resolver = LocaleFallbackResolver("en-us")
        assert resolver.default == LocaleId.parse("en_US")

    def test_memoized_chain_identity(self) -> None:
        resolver = LocaleFallbackResolver("en")
        first = resolver.resolve_chain("lv_LV")
        assert resolver.resolve_chain(LocaleId.parse("lv-lv")) is first

    def test_matches_function(self) -> None:
        resolver = LocaleFallbackResolver("en_US")
        assert resolver.resolve_chain("en_GB") == resolve_chain("en_GB", None, "en_US")

    def test_eviction_keeps_results_correct(self) -> None:
        resolver = LocaleFallbackResolver("en", maxsize=2)
        for code in ("de", "fr", "lv", "de"):
            assert resolver.resolve_chain(code)[-1] == LocaleId.parse("en")

    def test_invalid_maxsize(self) -> None:
        with pytest.raises(ValueError, match="maxsize"):
            LocaleFallbackResolver("en", maxsize=0)
