"""Cache configuration for the parsed-template cache.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from wordloom.constants import DEFAULT_CACHE_SIZE, MAX_DEPTH

__all__ = ["CacheConfig"]


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """Immutable configuration for TemplateCache.

    All fields have sensible defaults; ``CacheConfig()`` is a usable
    configuration.

    Attributes:
        enabled: Memoize parsed templates (default: True). When False every
            resolution parses its template afresh; useful for debugging.
        size: Maximum cached templates across all locales (default: 10000).
            The oldest inserted entries are evicted first.
        max_depth: Maximum plural nesting depth accepted by the parser.

    Example:
        >>> config = CacheConfig(size=500)
        >>> config.size
        500
    """

    enabled: bool = True
    size: int = DEFAULT_CACHE_SIZE
    max_depth: int = MAX_DEPTH

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If size or max_depth is not positive.
        """
        if self.size <= 0:
            msg = "size must be positive"
            raise ValueError(msg)
        if self.max_depth <= 0:
            msg = "max_depth must be positive"
            raise ValueError(msg)
