"""Multi-locale localization package for Localization.

Provides the full localization stack: type aliases, catalog storage,
loading infrastructure, configuration and the resolution orchestrator.

Submodules:
    types        - PEP 695 type aliases (MessageKey, LocaleCode, RawTemplate)
    catalog      - MessageCatalog, CatalogSnapshot, LocaleEntries
    loading      - CatalogLoader protocol, MappingLoader, FallbackInfo,
                   LoadResult, LoadSummary
    config       - LocalizationConfig
    orchestrator - Localization (fallback-chain resolution)

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability

from wordloom.enums import LoadMode, LoadStatus
from wordloom.localization.catalog import CatalogSnapshot, LocaleEntries, MessageCatalog
from wordloom.localization.config import LocalizationConfig
from wordloom.localization.loading import (
    CatalogLoader,
    FallbackInfo,
    LoadResult,
    LoadSummary,
    MappingLoader,
    flatten_entries,
)
from wordloom.localization.orchestrator import Localization
from wordloom.localization.types import CatalogEntries, LocaleCode, MessageKey, RawTemplate

__all__ = [
    # Main orchestrator
    "Localization",
    "LocalizationConfig",
    # Catalog storage
    "MessageCatalog",
    "CatalogSnapshot",
    "LocaleEntries",
    "LoadMode",
    # Loader protocol and implementations
    "CatalogLoader",
    "MappingLoader",
    "flatten_entries",
    # Load tracking
    "LoadStatus",
    "LoadResult",
    "LoadSummary",
    # Fallback observability
    "FallbackInfo",
    # Type aliases for user code type annotations
    "CatalogEntries",
    "LocaleCode",
    "MessageKey",
    "RawTemplate",
]
