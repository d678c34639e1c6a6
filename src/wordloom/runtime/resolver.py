"""Template resolver - converts parsed templates to formatted segments.

Walks a ParsedTemplate's node arena, substituting arguments and selecting
plural branches for the locale whose template won the fallback lookup.
Python 3.13+. Indirect dependency: Babel (via plural_rules).

Thread Safety:
    A resolver holds only immutable policy settings. Per-call state lives in
    a _Walk created for each resolution, so one resolver is shared freely
    across threads.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from wordloom.constants import (
    DEFAULT_MISSING_PLACEHOLDER_MARKER,
    LOG_TRUNCATE_LENGTH,
    PLURAL_OTHER,
)
from wordloom.diagnostics import ErrorTemplate, MissingPlaceholderError
from wordloom.enums import MissingPlaceholderPolicy
from wordloom.locale_utils import LocaleId
from wordloom.runtime.plural_rules import (
    Quantity,
    format_quantity,
    select_plural_category,
    to_quantity,
)
from wordloom.runtime.segments import (
    FormattedMessage,
    Segment,
    TextSegment,
    ValueSegment,
    display_text,
)
from wordloom.syntax import (
    ArgumentRef,
    Literal,
    ParsedTemplate,
    Placeholder,
    PluralPlaceholder,
    QuantityMarker,
)

__all__ = ["Arguments", "TemplateResolver", "normalize_arguments"]

logger = logging.getLogger(__name__)

type Arguments = Mapping[ArgumentRef, object] | Sequence[object]
"""Named/positional argument mapping, or a sequence of positional values."""

_MISSING = object()


def normalize_arguments(args: Arguments | None) -> Mapping[ArgumentRef, object]:
    """Present resolution arguments as a read-only mapping.

    A sequence (other than str) supplies positional arguments: index i maps
    to args[i]. The caller's object is never copied or mutated when it is
    already a mapping.
    """
    if args is None:
        return {}
    if isinstance(args, Mapping):
        return args
    if isinstance(args, str):
        msg = "Resolution arguments must be a mapping or a sequence, not str"
        raise TypeError(msg)
    return dict(enumerate(args))


def _lookup(args: Mapping[ArgumentRef, object], name: ArgumentRef) -> object:
    value = args.get(name, _MISSING)
    if value is _MISSING and isinstance(name, int):
        # Positional placeholders also match string-keyed indices ({"0": ...})
        value = args.get(str(name), _MISSING)
    return value


def _exact_match(selector: str, quantity: Quantity) -> bool:
    """True when an '=N' selector equals the quantity numerically."""
    try:
        expected = Decimal(selector[1:])
    except InvalidOperation:
        return False
    actual = Decimal(str(quantity)) if isinstance(quantity, float) else Decimal(quantity)
    return expected == actual


@dataclass(slots=True)
class _Walk:
    """Mutable state of one resolution."""

    template: ParsedTemplate
    key: str
    locale: LocaleId
    args: Mapping[ArgumentRef, object]
    segments: list[Segment] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)

    def text(self, value: str) -> None:
        if value:
            self.pending.append(value)

    def value(self, segment: ValueSegment) -> None:
        self.flush()
        self.segments.append(segment)

    def flush(self) -> None:
        if self.pending:
            self.segments.append(TextSegment("".join(self.pending)))
            self.pending.clear()


class TemplateResolver:
    """Evaluates parsed templates against resolution arguments.

    Missing arguments follow the configured MissingPlaceholderPolicy:
    - LEAVE_DELIMITERS: the placeholder's source text is kept verbatim
    - SUBSTITUTE_MARKER: the marker (formatted with name and key) replaces it
    - RAISE: MissingPlaceholderError is raised

    Plural placeholders select an exact '=N' branch first, then the CLDR
    category of the resolving locale, then 'other'. Non-numeric quantities
    always select 'other'.
    """

    __slots__ = ("_marker", "_policy")

    def __init__(
        self,
        *,
        missing_placeholder_policy: MissingPlaceholderPolicy = (
            MissingPlaceholderPolicy.LEAVE_DELIMITERS
        ),
        missing_placeholder_marker: str = DEFAULT_MISSING_PLACEHOLDER_MARKER,
    ) -> None:
        self._policy = MissingPlaceholderPolicy(missing_placeholder_policy)
        self._marker = missing_placeholder_marker

    @property
    def policy(self) -> MissingPlaceholderPolicy:
        """Missing-placeholder policy."""
        return self._policy

    def resolve(
        self,
        template: ParsedTemplate,
        *,
        key: str,
        locale: LocaleId,
        args: Arguments | None = None,
    ) -> FormattedMessage:
        """Resolve a parsed template to segments.

        Args:
            template: Parsed template of the winning locale
            key: Message key (used in diagnostics and markers)
            locale: Winning locale; drives plural rules and number format
            args: Resolution arguments

        Returns:
            FormattedMessage tagged with locale

        Raises:
            MissingPlaceholderError: Only under MissingPlaceholderPolicy.RAISE
        """
        walk = _Walk(template, key, locale, normalize_arguments(args))
        self._walk_sequence(walk, ParsedTemplate.ROOT, None)
        walk.flush()
        return FormattedMessage(tuple(walk.segments), locale)

    def _walk_sequence(
        self,
        walk: _Walk,
        sequence: int,
        quantity: ValueSegment | None,
    ) -> None:
        """Evaluate one node sequence. quantity renders '#' inside plurals."""
        nodes = walk.template.nodes
        for index in walk.template.sequences[sequence]:
            node = nodes[index]
            match node:
                case Literal(text=text):
                    walk.text(text)
                case Placeholder():
                    self._walk_placeholder(walk, node)
                case PluralPlaceholder():
                    self._walk_plural(walk, node)
                case QuantityMarker():
                    # Parser emits QuantityMarker only inside plural branches
                    if quantity is not None:
                        walk.value(quantity)

    def _walk_placeholder(self, walk: _Walk, node: Placeholder) -> None:
        value = _lookup(walk.args, node.name)
        if value is _MISSING:
            self._missing(walk, node.name, node.source)
            return
        walk.value(ValueSegment(node.name, value, node.directive, display_text(value)))

    def _walk_plural(self, walk: _Walk, node: PluralPlaceholder) -> None:
        value = _lookup(walk.args, node.name)
        if value is _MISSING:
            self._missing(walk, node.name, node.source)
            return

        quantity = to_quantity(value)
        if quantity is None:
            diagnostic = ErrorTemplate.plural_quantity_invalid(node.name, value)
            logger.warning(
                "%s (message %r)", diagnostic.message, walk.key[:LOG_TRUNCATE_LENGTH]
            )
            branch = node.branch(PLURAL_OTHER)
            rendered = display_text(value)
        else:
            branch = self._select_branch(node, quantity, walk.locale)
            rendered = format_quantity(quantity, walk.locale)

        if branch is None:
            # Parser only emits PluralPlaceholder with an 'other' branch
            walk.text(node.source)
            return
        marker = ValueSegment(node.name, value, None, rendered)
        self._walk_sequence(walk, branch, marker)

    @staticmethod
    def _select_branch(
        node: PluralPlaceholder, quantity: Quantity, locale: LocaleId
    ) -> int | None:
        for selector, index in node.branches:
            if selector.startswith("=") and _exact_match(selector, quantity):
                return index
        category = select_plural_category(quantity, locale)
        branch = node.branch(category.value)
        if branch is None:
            branch = node.branch(PLURAL_OTHER)
        return branch

    def _missing(self, walk: _Walk, name: ArgumentRef, source: str) -> None:
        if self._policy is MissingPlaceholderPolicy.RAISE:
            diagnostic = ErrorTemplate.placeholder_not_provided(name, walk.key)
            raise MissingPlaceholderError(diagnostic, key=walk.key, placeholder=name)

        logger.warning(
            "Argument %r not provided for message %r",
            name,
            walk.key[:LOG_TRUNCATE_LENGTH],
        )
        if self._policy is MissingPlaceholderPolicy.SUBSTITUTE_MARKER:
            walk.text(self._marker.format(name=name, key=walk.key))
        else:
            walk.text(source)
