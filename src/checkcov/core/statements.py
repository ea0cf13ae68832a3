"""Statement extraction over the neutral syntax tree.

Traversal is depth-first and left-to-right. Containers contribute their
children and are not statements themselves. Compound statements are
recorded before their sub-parts. Leaves are still searched for nested
containers (function literal bodies) whose statements follow the leaf.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, NoReturn

from checkcov._meta import logger
from checkcov.core.model.coverage import Function, Statement
from checkcov.core.model.positions import Position, Range
from checkcov.core.syntax import StatementKind, SyntaxNode
from checkcov.errors import InvalidTreeError

if TYPE_CHECKING:
    from checkcov.core.syntax import SourceTree

# Parsers rarely record where "else" sits; it is assumed to precede the
# alternate branch by this many columns.
ELSE_BACKUP = len("else ")


def _back_up(pos: Position, amount: int) -> Position:
    offset = pos.byte_offset - amount if pos.byte_offset >= amount else -1
    return Position(pos.line, max(1, pos.column - amount), offset)


class StatementCollector:
    """Accumulates the statements below one function body."""

    def __init__(self, path: str) -> None:
        self.path = path
        self.statements: list[Statement] = []

    def collect(self, node: SyntaxNode | None, *, role: str = "statement", parent: SyntaxNode | None = None) -> None:
        if node is None:
            self._invalid(f"missing {role}", parent)
        if node.kind is StatementKind.CONTAINER:
            self._collect_container(node)
        elif node.kind is StatementKind.COMPOUND:
            self.statements.append(Statement(range=node.range))
            self._descend(node)
        else:
            self.statements.append(Statement(range=node.range))
            for nested in node.nested:
                self.collect(nested, role="nested block", parent=node)

    def _collect_container(self, node: SyntaxNode) -> None:
        for child in node.children:
            if child is None:
                self._invalid(f"{node.label or 'container'} holds an empty statement slot", node)
            self.collect(child, parent=node)

    def _descend(self, node: SyntaxNode) -> None:
        name = node.label or "compound statement"
        if node.initializer is not None:
            self.collect(node.initializer, role=f"{name} initializer", parent=node)
        if node.assignment is not None:
            self.collect(node.assignment, role=f"{name} assignment", parent=node)
        self.collect(node.body, role=f"{name} body", parent=node)
        if node.alternate is not None:
            self.collect(self.alternate_container(node), role=f"{name} else branch", parent=node)
        if node.post is not None:
            self.collect(node.post, role=f"{name} post statement", parent=node)

    def alternate_container(self, node: SyntaxNode) -> SyntaxNode:
        """Return the else branch of *node* as a container starting at ``else``.

        An else-if chain is wrapped in a synthesized container so the nested
        conditional keeps a range of its own.
        """
        alternate = node.alternate
        if alternate is None:
            self._invalid("missing else branch", node)
        start = node.alternate_keyword or _back_up(alternate.range.start, ELSE_BACKUP)
        span = Range(start, alternate.range.end)
        if alternate.kind is StatementKind.COMPOUND:
            return SyntaxNode.container(span, (alternate,), label="else")
        if alternate.kind is StatementKind.CONTAINER:
            return replace(alternate, range=span)
        self._invalid(f"unexpected {alternate.label or alternate.kind} in else branch", node)

    def _invalid(self, message: str, node: SyntaxNode | None) -> NoReturn:
        if node is None:
            raise InvalidTreeError(self.path, message)
        start = node.range.start
        raise InvalidTreeError(self.path, message, line=start.line, column=start.column)


def collect_statements(body: SyntaxNode, *, path: str) -> tuple[Statement, ...]:
    """Return the statements below *body* in traversal order."""
    collector = StatementCollector(path)
    collector.collect(body, role="function body")
    return tuple(collector.statements)


def extract_functions(tree: SourceTree) -> list[Function]:
    """Return one :class:`Function` per declaration in *tree*."""
    functions: list[Function] = []
    for decl in tree.functions:
        statements = () if decl.body is None else collect_statements(decl.body, path=tree.path)
        logger.debug("%s: %s has %d statements", tree.path, decl.name, len(statements))
        functions.append(
            Function(name=decl.name, source_path=tree.path, range=decl.range, statements=statements)
        )
    return functions


__all__ = ["ELSE_BACKUP", "StatementCollector", "collect_statements", "extract_functions"]
