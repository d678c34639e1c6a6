"""Template node definitions.

A ParsedTemplate is an arena: every node lives in one flat ``nodes`` tuple,
and ordered node sequences (the root sequence and each plural branch) are
tuples of indices into it. Plural branches point at sequences by index
instead of owning nested node lists, so templates stay flat, immutable and
cheap to share between threads.

Python 3.13+.
"""

from dataclasses import dataclass
from typing import ClassVar, TypeIs

from wordloom.constants import PLURAL_OTHER
from wordloom.diagnostics import Diagnostic

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Nodes
    "Literal",
    "Placeholder",
    "PluralPlaceholder",
    "QuantityMarker",
    # Container
    "ParsedTemplate",
    # Type aliases
    "ArgumentRef",
    "TemplateNode",
]

type ArgumentRef = str | int
"""Placeholder reference: argument name or positional index."""


@dataclass(frozen=True, slots=True)
class Literal:
    """Literal text copied verbatim to output (escapes already applied)."""

    text: str


@dataclass(frozen=True, slots=True)
class Placeholder:
    """Substitution point for a named or positional argument.

    Attributes:
        name: Argument name or positional index
        directive: Opaque formatting directive passed through to segments
        source: Original template text, used by LEAVE_DELIMITERS policy
    """

    name: ArgumentRef
    directive: str | None = None
    source: str = ""

    @staticmethod
    def guard(node: object) -> TypeIs["Placeholder"]:
        """Type guard for Placeholder."""
        return isinstance(node, Placeholder)


@dataclass(frozen=True, slots=True)
class PluralPlaceholder:
    """Quantity-dependent placeholder with one sub-sequence per selector.

    Selectors are plural category names ("one", "other", ...) or exact-value
    selectors ("=0", "=1"). Branch order follows the source; the first
    occurrence of a duplicated selector wins.

    Attributes:
        name: Argument supplying the quantity
        branches: (selector, sequence index) pairs
        source: Original template text, used by LEAVE_DELIMITERS policy
    """

    name: ArgumentRef
    branches: tuple[tuple[str, int], ...]
    source: str = ""

    def branch(self, selector: str) -> int | None:
        """Return the sequence index for a selector, or None if not authored."""
        for candidate, index in self.branches:
            if candidate == selector:
                return index
        return None

    @property
    def selectors(self) -> tuple[str, ...]:
        """Authored selectors in source order."""
        return tuple(selector for selector, _ in self.branches)

    @property
    def has_other(self) -> bool:
        """True when the mandatory 'other' branch is authored."""
        return self.branch(PLURAL_OTHER) is not None

    @staticmethod
    def guard(node: object) -> TypeIs["PluralPlaceholder"]:
        """Type guard for PluralPlaceholder."""
        return isinstance(node, PluralPlaceholder)


@dataclass(frozen=True, slots=True)
class QuantityMarker:
    """Unescaped '#' inside a plural branch; renders the plural quantity."""


type TemplateNode = Literal | Placeholder | PluralPlaceholder | QuantityMarker


@dataclass(frozen=True, slots=True)
class ParsedTemplate:
    """Immutable parse result for one raw template.

    Attributes:
        nodes: Node arena
        sequences: Ordered node-index tuples; sequence ROOT is the template body
        diagnostics: Validation findings recorded while parsing
    """

    ROOT: ClassVar[int] = 0

    nodes: tuple[TemplateNode, ...]
    sequences: tuple[tuple[int, ...], ...]
    diagnostics: tuple[Diagnostic, ...] = ()

    def sequence(self, index: int) -> tuple[TemplateNode, ...]:
        """Materialize one sequence as nodes."""
        return tuple(self.nodes[i] for i in self.sequences[index])

    @property
    def root(self) -> tuple[TemplateNode, ...]:
        """Top-level node sequence."""
        return self.sequence(self.ROOT)

    @property
    def is_static(self) -> bool:
        """True when the template is plain text (no placeholders at all)."""
        return all(isinstance(node, Literal) for node in self.nodes)

    @property
    def has_errors(self) -> bool:
        """True when any error-level diagnostic was recorded."""
        return any(d.severity == "error" for d in self.diagnostics)
