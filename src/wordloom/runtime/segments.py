"""Resolution output segments.

A resolved message is an ordered sequence of segments: literal text, or an
argument value tagged with the formatting directive that surrounded it.
Directives are opaque; a rendering collaborator decides what they mean.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, overload

if TYPE_CHECKING:
    from wordloom.locale_utils import LocaleId
    from wordloom.syntax import ArgumentRef

__all__ = ["FormattedMessage", "Segment", "TextSegment", "ValueSegment"]


@dataclass(frozen=True, slots=True)
class TextSegment:
    """Literal output text."""

    text: str


@dataclass(frozen=True, slots=True)
class ValueSegment:
    """Substituted argument value.

    Attributes:
        name: Argument name or positional index
        value: The argument as supplied by the caller
        directive: Formatting directive from the template, if any
        text: Plain-text display form of value
    """

    name: ArgumentRef
    value: object
    directive: str | None
    text: str


type Segment = TextSegment | ValueSegment


def display_text(value: object) -> str:
    """Plain-text form of an argument value."""
    if isinstance(value, FormattedMessage):
        return value.text
    return str(value)


@dataclass(frozen=True, slots=True)
class FormattedMessage(Sequence[Segment]):
    """Immutable, ordered result of one resolution.

    Behaves as a read-only sequence of segments.

    Attributes:
        segments: Output segments in order
        locale: Locale whose template produced the output, or None when the
            key was not found anywhere and a policy produced the text

    Example:
        >>> msg = FormattedMessage((TextSegment("Hello"),), None)
        >>> msg.text
        'Hello'
    """

    segments: tuple[Segment, ...]
    locale: LocaleId | None = None

    @property
    def text(self) -> str:
        """Concatenated plain text of every segment."""
        return "".join(segment.text for segment in self.segments)

    @property
    def values(self) -> tuple[ValueSegment, ...]:
        """Only the substituted value segments."""
        return tuple(s for s in self.segments if isinstance(s, ValueSegment))

    @overload
    def __getitem__(self, index: int) -> Segment: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Segment, ...]: ...

    def __getitem__(self, index: int | slice) -> Segment | tuple[Segment, ...]:
        return self.segments[index]

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __str__(self) -> str:
        return self.text
