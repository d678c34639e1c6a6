"""wordloom runtime package.

Provides plural rules, fallback chains, the template cache, the
readers-writer lock and the template resolver.
Depends on syntax package for parsing.

Python 3.13+.
"""

from .cache import TemplateCache
from .cache_config import CacheConfig
from .fallback import LocaleFallbackResolver, resolve_chain
from .plural_rules import format_quantity, select_plural_category, to_quantity
from .resolver import Arguments, TemplateResolver, normalize_arguments
from .rwlock import RWLock
from .segments import FormattedMessage, Segment, TextSegment, ValueSegment

__all__ = [
    "Arguments",
    "CacheConfig",
    "FormattedMessage",
    "LocaleFallbackResolver",
    "RWLock",
    "Segment",
    "TemplateCache",
    "TemplateResolver",
    "TextSegment",
    "ValueSegment",
    "format_quantity",
    "normalize_arguments",
    "resolve_chain",
    "select_plural_category",
    "to_quantity",
]
