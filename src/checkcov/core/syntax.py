"""Parser-neutral statement tree consumed by the statement extractor.

Concrete parsers (see :mod:`checkcov.inputs.golang`) translate their own node
types into :class:`SyntaxNode` values tagged with a :class:`StatementKind`.
The extractor only ever dispatches on that tag.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from checkcov.core.model.positions import Position, Range


class StatementKind(StrEnum):
    """How the extractor treats a node."""

    CONTAINER = "container"
    COMPOUND = "compound"
    LEAF = "leaf"


@dataclass(frozen=True, slots=True)
class SyntaxNode:
    """One statement-level node.

    Fields are populated according to ``kind``:

    * ``CONTAINER``: ``children``
    * ``COMPOUND``: ``initializer``, ``assignment``, ``body``, ``alternate``,
      ``alternate_keyword`` and ``post``; only ``body`` is mandatory
    * ``LEAF``: ``nested`` (containers found inside the statement, e.g.
      function literal bodies)

    ``label`` names the concrete node type for diagnostics.
    """

    kind: StatementKind
    range: Range
    label: str = ""
    children: tuple[SyntaxNode | None, ...] = ()
    initializer: SyntaxNode | None = None
    assignment: SyntaxNode | None = None
    body: SyntaxNode | None = None
    alternate: SyntaxNode | None = None
    alternate_keyword: Position | None = None
    post: SyntaxNode | None = None
    nested: tuple[SyntaxNode, ...] = ()

    @classmethod
    def container(
        cls,
        range_: Range,
        children: tuple[SyntaxNode | None, ...] = (),
        *,
        label: str = "block",
    ) -> SyntaxNode:
        return cls(StatementKind.CONTAINER, range_, label=label, children=children)

    @classmethod
    def compound(
        cls,
        range_: Range,
        *,
        body: SyntaxNode | None,
        initializer: SyntaxNode | None = None,
        assignment: SyntaxNode | None = None,
        alternate: SyntaxNode | None = None,
        alternate_keyword: Position | None = None,
        post: SyntaxNode | None = None,
        label: str = "",
    ) -> SyntaxNode:
        return cls(
            StatementKind.COMPOUND,
            range_,
            label=label,
            initializer=initializer,
            assignment=assignment,
            body=body,
            alternate=alternate,
            alternate_keyword=alternate_keyword,
            post=post,
        )

    @classmethod
    def leaf(cls, range_: Range, *, nested: tuple[SyntaxNode, ...] = (), label: str = "") -> SyntaxNode:
        return cls(StatementKind.LEAF, range_, label=label, nested=nested)


@dataclass(frozen=True, slots=True)
class FunctionDecl:
    """A named top-level function or method. ``body`` is ``None`` for bodiless declarations."""

    name: str
    range: Range
    body: SyntaxNode | None


@dataclass(frozen=True, slots=True)
class SourceTree:
    """All function declarations of one source file."""

    path: str
    functions: tuple[FunctionDecl, ...] = ()


__all__ = ["FunctionDecl", "SourceTree", "StatementKind", "SyntaxNode"]
