"""Pytest configuration for the wordloom test suite.

Single Source of Truth for Hypothesis max_examples:
- dev: Local development with 500 examples (thorough property testing)
- ci: CI runs with 50 examples (fast feedback)
- verbose: Debug mode with progress output (100 examples)

Profile auto-detection:
- CI=true environment variable -> "ci" profile
- HYPOTHESIS_PROFILE env var -> explicit override
- Otherwise -> "dev" profile (local development)

Override manually: HYPOTHESIS_PROFILE=verbose pytest tests/
"""

import os

import pytest
from hypothesis import HealthCheck, Phase, Verbosity, settings

from wordloom import Localization, LocalizationConfig

# =============================================================================
# HYPOTHESIS PROFILES - SINGLE SOURCE OF TRUTH
# =============================================================================

# Development profile: thorough local testing (500 examples, silent)
settings.register_profile(
    "dev",
    max_examples=500,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)

# CI profile: fast feedback (50 examples)
settings.register_profile(
    "ci",
    max_examples=50,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=True,
    print_blob=True,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)

# Verbose profile: debug mode with progress visibility (100 examples)
settings.register_profile(
    "verbose",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
    verbosity=Verbosity.verbose,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)


# =============================================================================
# AUTO-DETECT EXECUTION CONTEXT
# =============================================================================


def _detect_profile() -> str:
    """Detect appropriate Hypothesis profile based on execution context.

    Priority:
    1. HYPOTHESIS_PROFILE env var (explicit override)
    2. CI=true env var
    3. Default to "dev" (local development)
    """
    explicit = os.environ.get("HYPOTHESIS_PROFILE")
    if explicit in ("dev", "ci", "verbose"):
        return explicit

    if os.environ.get("CI") == "true":
        return "ci"

    return "dev"


settings.load_profile(_detect_profile())


# =============================================================================
# SHARED FIXTURES
# =============================================================================


@pytest.fixture
def l10n() -> Localization:
    """Localization with default locale 'en' and a small two-locale catalog."""
    localization = Localization(LocalizationConfig(default_locale="en"))
    localization.load_locale(
        "en",
        {
            "greet.hello": "Hello, {name}!",
            "inbox.count": "You have {count, plural, one{# item} other{# items}}",
            "farewell": "Goodbye",
        },
    )
    localization.load_locale("lv", {"greet.hello": "Sveiki, {name}!"})
    return localization
