"""Placeholder parser: raw template string -> ParsedTemplate.

Template syntax:
    Hello, {name}!                      named placeholder
    {0} of {1}                          positional placeholders
    {name, bold}                        placeholder with opaque directive
    {count, plural, one{# item} other{# items}}
    {count, plural, =0{none} one{#} other{#}}   exact-value selector
    \\{ \\} \\\\                          escaped delimiters
    \\#                                  literal '#' inside a plural branch

The parser is total: it never raises for any input string. Malformed syntax
degrades to literal text:
    - an unmatched '{' is kept as '{' and scanning resumes after it
    - a stray '}' is literal
    - a placeholder with invalid inner content is kept verbatim, braces
      included, and scanning resumes after its closing brace
    - a plural placeholder with no 'other' branch, or nested beyond the depth
      limit, is kept verbatim and a Diagnostic is recorded on the template

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from wordloom.constants import (
    DIRECTIVE_SEPARATOR,
    ESCAPE_CHAR,
    MAX_DEPTH,
    PLACEHOLDER_CLOSE,
    PLACEHOLDER_OPEN,
    PLURAL_KEYWORD,
    QUANTITY_CHAR,
)
from wordloom.diagnostics import Diagnostic, ErrorTemplate
from wordloom.enums import PluralCategory

from .nodes import (
    ArgumentRef,
    Literal,
    ParsedTemplate,
    Placeholder,
    PluralPlaceholder,
    QuantityMarker,
    TemplateNode,
)

__all__ = ["TemplateParser", "extract_placeholders", "parse"]

_NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_.\-]*")
_INDEX_PATTERN = re.compile(r"[0-9]+")
_EXACT_SELECTOR_PATTERN = re.compile(r"=-?[0-9]+(?:\.[0-9]+)?")
_CATEGORY_SELECTORS: frozenset[str] = frozenset(c.value for c in PluralCategory)


@dataclass(slots=True)
class _ArenaBuilder:
    """Mutable accumulator used during a single parse call."""

    nodes: list[TemplateNode] = field(default_factory=list)
    sequences: list[tuple[int, ...]] = field(default_factory=lambda: [()])
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def add_node(self, node: TemplateNode) -> int:
        self.nodes.append(node)
        return len(self.nodes) - 1

    def add_sequence(self, indices: list[int]) -> int:
        self.sequences.append(tuple(indices))
        return len(self.sequences) - 1

    def checkpoint(self) -> tuple[int, int, int]:
        return (len(self.nodes), len(self.sequences), len(self.diagnostics))

    def rollback(self, mark: tuple[int, int, int]) -> None:
        nodes, sequences, diagnostics = mark
        del self.nodes[nodes:]
        del self.sequences[sequences:]
        del self.diagnostics[diagnostics:]

    def build(self) -> ParsedTemplate:
        return ParsedTemplate(
            nodes=tuple(self.nodes),
            sequences=tuple(self.sequences),
            diagnostics=tuple(self.diagnostics),
        )


def _find_close(source: str, open_pos: int, end: int) -> int:
    """Return the index of the '}' matching source[open_pos], or -1."""
    depth = 0
    pos = open_pos
    while pos < end:
        char = source[pos]
        if char == ESCAPE_CHAR and pos + 1 < end:
            pos += 2
            continue
        if char == PLACEHOLDER_OPEN:
            depth += 1
        elif char == PLACEHOLDER_CLOSE:
            depth -= 1
            if depth == 0:
                return pos
        pos += 1
    return -1


def _parse_ref(text: str) -> ArgumentRef | None:
    """Parse placeholder name or index; None when invalid."""
    name = text.strip()
    if _INDEX_PATTERN.fullmatch(name):
        return int(name)
    if _NAME_PATTERN.fullmatch(name):
        return name
    return None


class TemplateParser:
    """Single-pass parser producing arena-backed ParsedTemplate objects.

    Stateless between calls; one instance can be shared by all threads.

    Attributes:
        max_depth: Maximum plural nesting depth
    """

    __slots__ = ("_max_depth",)

    def __init__(self, *, max_depth: int = MAX_DEPTH) -> None:
        if max_depth <= 0:
            msg = "max_depth must be positive"
            raise ValueError(msg)
        self._max_depth = max_depth

    @property
    def max_depth(self) -> int:
        """Maximum plural nesting depth."""
        return self._max_depth

    def parse(self, source: str) -> ParsedTemplate:
        """Parse a raw template.

        Args:
            source: Raw template text

        Returns:
            ParsedTemplate; identical input always yields an equal result
        """
        builder = _ArenaBuilder()
        root = self._parse_sequence(source, 0, len(source), builder, depth=0, in_plural=False)
        builder.sequences[ParsedTemplate.ROOT] = tuple(root)
        return builder.build()

    def _parse_sequence(
        self,
        source: str,
        start: int,
        end: int,
        builder: _ArenaBuilder,
        *,
        depth: int,
        in_plural: bool,
    ) -> list[int]:
        """Scan source[start:end] into node indices."""
        indices: list[int] = []
        buffer: list[str] = []

        def flush() -> None:
            if buffer:
                indices.append(builder.add_node(Literal("".join(buffer))))
                buffer.clear()

        pos = start
        while pos < end:
            char = source[pos]

            if char == ESCAPE_CHAR and pos + 1 < end:
                following = source[pos + 1]
                if following in (PLACEHOLDER_OPEN, PLACEHOLDER_CLOSE, ESCAPE_CHAR) or (
                    in_plural and following == QUANTITY_CHAR
                ):
                    buffer.append(following)
                    pos += 2
                    continue
                buffer.append(char)
                pos += 1
                continue

            if char == PLACEHOLDER_OPEN:
                close = _find_close(source, pos, end)
                if close == -1:
                    buffer.append(char)
                    pos += 1
                    continue
                node = self._parse_placeholder(source, pos, close, builder, depth=depth)
                if node is None:
                    buffer.append(source[pos : close + 1])
                elif isinstance(node, Literal):
                    buffer.append(node.text)
                else:
                    flush()
                    indices.append(builder.add_node(node))
                pos = close + 1
                continue

            if char == QUANTITY_CHAR and in_plural:
                flush()
                indices.append(builder.add_node(QuantityMarker()))
                pos += 1
                continue

            buffer.append(char)
            pos += 1

        flush()
        return indices

    def _parse_placeholder(
        self,
        source: str,
        open_pos: int,
        close_pos: int,
        builder: _ArenaBuilder,
        *,
        depth: int,
    ) -> TemplateNode | None:
        """Parse source[open_pos:close_pos + 1].

        Returns:
            Placeholder or PluralPlaceholder on success, a Literal holding the
            verbatim source when a plural must be kept as text, or None when
            the braces do not form a placeholder at all.
        """
        inner_start = open_pos + 1
        inner = source[inner_start:close_pos]
        raw = source[open_pos : close_pos + 1]

        name_part, separator, rest = inner.partition(DIRECTIVE_SEPARATOR)
        name = _parse_ref(name_part)
        if name is None:
            return None
        if not separator:
            return Placeholder(name=name, source=raw)

        keyword, body_separator, _body = rest.partition(DIRECTIVE_SEPARATOR)
        if keyword.strip() != PLURAL_KEYWORD or not body_separator:
            return Placeholder(name=name, directive=rest.strip() or None, source=raw)

        body_start = inner_start + len(name_part) + 1 + len(keyword) + 1
        if depth >= self._max_depth:
            builder.diagnostics.append(
                ErrorTemplate.nesting_depth_exceeded(self._max_depth, open_pos, close_pos + 1)
            )
            return Literal(raw)

        mark = builder.checkpoint()
        branches = self._parse_plural_body(source, body_start, close_pos, builder, depth=depth)
        if branches is None:
            builder.rollback(mark)
            return None

        plural = PluralPlaceholder(name=name, branches=branches, source=raw)
        if not plural.has_other:
            builder.rollback(mark)
            builder.diagnostics.append(
                ErrorTemplate.plural_missing_other(name, open_pos, close_pos + 1)
            )
            return Literal(raw)
        return plural

    def _parse_plural_body(
        self,
        source: str,
        start: int,
        end: int,
        builder: _ArenaBuilder,
        *,
        depth: int,
    ) -> tuple[tuple[str, int], ...] | None:
        """Parse 'selector{sub} selector{sub} ...'; None if malformed."""
        branches: list[tuple[str, int]] = []
        seen: set[str] = set()
        pos = start
        while True:
            while pos < end and source[pos].isspace():
                pos += 1
            if pos >= end:
                break

            selector_start = pos
            while pos < end and not source[pos].isspace() and source[pos] != PLACEHOLDER_OPEN:
                pos += 1
            selector = source[selector_start:pos]
            if selector not in _CATEGORY_SELECTORS and not _EXACT_SELECTOR_PATTERN.fullmatch(
                selector
            ):
                return None

            while pos < end and source[pos].isspace():
                pos += 1
            if pos >= end or source[pos] != PLACEHOLDER_OPEN:
                return None
            close = _find_close(source, pos, end)
            if close == -1:
                return None

            if selector not in seen:
                seen.add(selector)
                indices = self._parse_sequence(
                    source, pos + 1, close, builder, depth=depth + 1, in_plural=True
                )
                branches.append((selector, builder.add_sequence(indices)))
            pos = close + 1

        if not branches:
            return None
        return tuple(branches)


_DEFAULT_PARSER = TemplateParser()


def parse(source: str) -> ParsedTemplate:
    """Parse a raw template with default limits.

    Example:
        >>> template = parse("Hello, {name}!")
        >>> [type(n).__name__ for n in template.root]
        ['Literal', 'Placeholder', 'Literal']
    """
    return _DEFAULT_PARSER.parse(source)


def extract_placeholders(template: ParsedTemplate) -> frozenset[ArgumentRef]:
    """Return every argument name/index the template references.

    Includes plural quantity arguments and placeholders inside plural
    branches.
    """
    refs: set[ArgumentRef] = set()
    for node in template.nodes:
        if Placeholder.guard(node) or PluralPlaceholder.guard(node):
            refs.add(node.name)
    return frozenset(refs)

