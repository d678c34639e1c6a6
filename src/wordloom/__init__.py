"""wordloom - Message catalog resolution with locale fallback and CLDR plurals.

Resolves message keys to locale-appropriate, formatted output. Templates
carry named or positional placeholders and ICU-style plural placeholders;
formatting directives pass through opaquely to the caller's renderer.

Public API:
    Localization - Catalog loading and resolution across fallback chains
    LocalizationConfig - Default locale, missing-key/placeholder policies
    MappingLoader - Loader over pre-decoded nested mappings
    FormattedMessage - Resolution result (TextSegment / ValueSegment sequence)
    LocaleId - Parsed, canonical locale identifier
    parse_template - Parse a raw template to its node arena
    validate_template - Report template diagnostics

Exceptions:
    WordloomError - Base exception class
    MissingKeyError - Key absent from every chain locale (policy RAISE)
    MissingPlaceholderError - Argument not supplied (policy RAISE)
    TemplateValidationError - Invalid template at load (strict_templates)
    CatalogLoadError - Loader payload cannot become catalog entries

Submodules:
    wordloom.syntax - Template nodes and parser
    wordloom.runtime - Plural rules, fallback chains, cache, resolver
    wordloom.localization - Catalog, loaders, orchestration
    wordloom.diagnostics - Error types, diagnostic codes, validation results
"""

# Essential Public API - Minimal exports for clean namespace
from .diagnostics import (
    CatalogLoadError,
    MissingKeyError,
    MissingPlaceholderError,
    TemplateValidationError,
    WordloomError,
)
from .enums import LoadMode, MissingKeyPolicy, MissingPlaceholderPolicy, PluralCategory
from .locale_utils import LocaleId
from .localization import Localization, LocalizationConfig, MappingLoader
from .runtime import CacheConfig, FormattedMessage, TextSegment, ValueSegment
from .syntax import parse as parse_template
from .validation import validate_template

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("wordloom")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "CacheConfig",
    "CatalogLoadError",
    "FormattedMessage",
    "LoadMode",
    "LocaleId",
    "Localization",
    "LocalizationConfig",
    "MappingLoader",
    "MissingKeyError",
    "MissingKeyPolicy",
    "MissingPlaceholderError",
    "MissingPlaceholderPolicy",
    "PluralCategory",
    "TemplateValidationError",
    "TextSegment",
    "ValueSegment",
    "WordloomError",
    "__version__",
    "parse_template",
    "validate_template",
]
