"""Template syntax package.

Provides the template node arena and the total placeholder parser.
Depends only on diagnostics; runtime and localization build on it.

Python 3.13+. Zero external dependencies.
"""

from .nodes import (
    ArgumentRef,
    Literal,
    ParsedTemplate,
    Placeholder,
    PluralPlaceholder,
    QuantityMarker,
    TemplateNode,
)
from .parser import TemplateParser, extract_placeholders, parse

__all__ = [
    "ArgumentRef",
    "Literal",
    "ParsedTemplate",
    "Placeholder",
    "PluralPlaceholder",
    "QuantityMarker",
    "TemplateNode",
    "TemplateParser",
    "extract_placeholders",
    "parse",
]
