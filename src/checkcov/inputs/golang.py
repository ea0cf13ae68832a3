"""Go source adapter: tree-sitter parse trees to the neutral statement tree."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

import tree_sitter_language_pack as tslp

from checkcov._meta import logger
from checkcov.core.model.positions import Position, Range
from checkcov.core.syntax import FunctionDecl, SourceTree, SyntaxNode
from checkcov.errors import ParseError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

    import tree_sitter

LANGUAGE = "go"

_CLAUSES = frozenset({"expression_case", "default_case", "type_case", "communication_case"})
_IGNORED = frozenset({"comment"})

# Parsers are not thread-safe; keep one per worker thread.
_local = threading.local()


def get_parser() -> tree_sitter.Parser:
    """Get a (cached) tree-sitter parser for Go."""
    cache: dict[str, tree_sitter.Parser] = _local.__dict__.setdefault("parsers", {})
    cached = cache.get(LANGUAGE)
    if cached is not None:
        return cached
    parser = tslp.get_parser(LANGUAGE)
    cache[LANGUAGE] = parser
    return parser


def _text(node: tree_sitter.Node | None) -> str:
    if node is None or not node.text:
        return ""
    return node.text.decode("utf-8", errors="replace")


def start_position(node: tree_sitter.Node) -> Position:
    return Position(node.start_point.row + 1, node.start_point.column + 1, node.start_byte)


def end_position(node: tree_sitter.Node) -> Position:
    return Position(node.end_point.row + 1, node.end_point.column + 1, node.end_byte)


def node_range(node: tree_sitter.Node) -> Range:
    return Range(start_position(node), end_position(node))


def _first_error(node: tree_sitter.Node) -> tree_sitter.Node | None:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def _receiver_type(node: tree_sitter.Node) -> str:
    receiver = node.child_by_field_name("receiver")
    if receiver is None:
        return ""
    for param in receiver.named_children:
        if param.type == "parameter_declaration":
            text = _text(param.child_by_field_name("type")).lstrip("*")
            return text.split("[", 1)[0].strip()
    return ""


class GoTreeBuilder:
    """Translate one Go ``source_file`` into a :class:`SourceTree`."""

    def __init__(self, path: str) -> None:
        self.path = path
        self._compound: dict[str, Callable[[tree_sitter.Node], SyntaxNode]] = {
            "if_statement": self._if,
            "for_statement": self._for,
            "expression_switch_statement": self._switch,
            "type_switch_statement": self._type_switch,
            "select_statement": self._select,
            "labeled_statement": self._labeled,
        }

    def build(self, root: tree_sitter.Node) -> SourceTree:
        functions: list[FunctionDecl] = []
        for child in root.named_children:
            if child.type not in {"function_declaration", "method_declaration"}:
                continue
            name = _text(child.child_by_field_name("name"))
            if child.type == "method_declaration":
                receiver = _receiver_type(child)
                name = f"{receiver}.{name}" if receiver else name
            body = child.child_by_field_name("body")
            functions.append(
                FunctionDecl(name=name, range=node_range(child), body=self._optional(body))
            )
        return SourceTree(path=self.path, functions=tuple(functions))

    # -- dispatch ---------------------------------------------------------
    def statement(self, node: tree_sitter.Node) -> SyntaxNode:
        if node.type == "block":
            return SyntaxNode.container(
                node_range(node), self._statements(node.named_children), label="block"
            )
        if node.type in _CLAUSES:
            return self._clause(node)
        handler = self._compound.get(node.type)
        if handler is not None:
            return handler(node)
        return SyntaxNode.leaf(node_range(node), nested=self._nested(node), label=node.type)

    def _optional(self, node: tree_sitter.Node | None) -> SyntaxNode | None:
        return None if node is None else self.statement(node)

    def _statements(self, nodes: Iterable[tree_sitter.Node]) -> tuple[SyntaxNode, ...]:
        out: list[SyntaxNode] = []
        for node in nodes:
            if node.type in _IGNORED:
                continue
            if node.type == "statement_list":
                out.extend(self._statements(node.named_children))
                continue
            out.append(self.statement(node))
        return tuple(out)

    def _nested(self, node: tree_sitter.Node) -> tuple[SyntaxNode, ...]:
        """Return the bodies of function literals inside a leaf statement."""
        found: list[SyntaxNode] = []
        for child in node.named_children:
            if child.type == "func_literal":
                body = child.child_by_field_name("body")
                if body is not None:
                    found.append(self.statement(body))
                continue
            found.extend(self._nested(child))
        return tuple(found)

    # -- containers -------------------------------------------------------
    def _clause(self, node: tree_sitter.Node) -> SyntaxNode:
        members: list[tree_sitter.Node] = []
        seen_colon = False
        for child in node.children:
            if not seen_colon:
                seen_colon = child.type == ":"
                continue
            if child.is_named:
                members.append(child)
        return SyntaxNode.container(node_range(node), self._statements(members), label=node.type)

    def _braced_clauses(self, node: tree_sitter.Node) -> SyntaxNode | None:
        opening = closing = None
        for child in node.children:
            if child.type == "{" and opening is None:
                opening = child
            elif child.type == "}":
                closing = child
        if opening is None or closing is None:
            return None
        clauses = tuple(self._clause(c) for c in node.named_children if c.type in _CLAUSES)
        span = Range(start_position(opening), end_position(closing))
        return SyntaxNode.container(span, clauses, label=f"{node.type} body")

    # -- compound statements ----------------------------------------------
    def _if(self, node: tree_sitter.Node) -> SyntaxNode:
        alternative = node.child_by_field_name("alternative")
        keyword = None
        if alternative is not None:
            keyword = next((start_position(c) for c in node.children if c.type == "else"), None)
        return SyntaxNode.compound(
            node_range(node),
            label="if statement",
            initializer=self._optional(node.child_by_field_name("initializer")),
            body=self._optional(node.child_by_field_name("consequence")),
            alternate=self._optional(alternative),
            alternate_keyword=keyword,
        )

    def _for(self, node: tree_sitter.Node) -> SyntaxNode:
        clause = next((c for c in node.named_children if c.type == "for_clause"), None)
        is_range = any(c.type == "range_clause" for c in node.named_children)
        return SyntaxNode.compound(
            node_range(node),
            label="range statement" if is_range else "for statement",
            initializer=self._optional(clause.child_by_field_name("initializer")) if clause else None,
            body=self._optional(node.child_by_field_name("body")),
            post=self._optional(clause.child_by_field_name("update")) if clause else None,
        )

    def _switch(self, node: tree_sitter.Node) -> SyntaxNode:
        return SyntaxNode.compound(
            node_range(node),
            label="switch statement",
            initializer=self._optional(node.child_by_field_name("initializer")),
            body=self._braced_clauses(node),
        )

    def _type_switch(self, node: tree_sitter.Node) -> SyntaxNode:
        return SyntaxNode.compound(
            node_range(node),
            label="type switch statement",
            initializer=self._optional(node.child_by_field_name("initializer")),
            assignment=self._type_switch_guard(node),
            body=self._braced_clauses(node),
        )

    def _type_switch_guard(self, node: tree_sitter.Node) -> SyntaxNode | None:
        """Synthesize the ``x := y.(type)`` guard, which tree-sitter does not wrap."""
        value = node.child_by_field_name("value")
        if value is None:
            return None
        alias = node.child_by_field_name("alias")
        closing = None
        for child in node.children:
            if child.type == "{":
                break
            if child.type == ")" and child.start_byte >= value.end_byte:
                closing = child
        end = end_position(closing) if closing is not None else end_position(value)
        start = start_position(alias) if alias is not None else start_position(value)
        return SyntaxNode.leaf(Range(start, end), nested=self._nested(value), label="type switch guard")

    def _select(self, node: tree_sitter.Node) -> SyntaxNode:
        return SyntaxNode.compound(
            node_range(node), label="select statement", body=self._braced_clauses(node)
        )

    def _labeled(self, node: tree_sitter.Node) -> SyntaxNode:
        inner = [
            c for c in node.named_children if c.type not in _IGNORED and c.type != "label_name"
        ]
        if not inner:
            # A trailing label ("L:" right before "}") labels an empty statement.
            return SyntaxNode.leaf(node_range(node), label="labeled statement")
        return SyntaxNode.compound(
            node_range(node), label="labeled statement", body=self.statement(inner[0])
        )


def parse_source(source: bytes, path: str) -> SourceTree:
    """Parse Go *source* into a :class:`SourceTree`.

    Raises :class:`~checkcov.errors.ParseError` if the parse tree contains
    errors or the file lacks a package clause.
    """
    tree = get_parser().parse(source)
    root = tree.root_node
    if root.has_error:
        bad = _first_error(root) or root
        pos = start_position(bad)
        raise ParseError(path, "syntax error", line=pos.line, column=pos.column)
    if not any(child.type == "package_clause" for child in root.named_children):
        raise ParseError(path, "expected 'package' clause", line=1, column=1)
    result = GoTreeBuilder(path).build(root)
    logger.debug("%s: parsed %d function declarations", path, len(result.functions))
    return result


def parse_file(path: Path, *, display_path: str | None = None) -> SourceTree:
    """Read and parse the Go file at *path*."""
    name = display_path or path.as_posix()
    try:
        source = path.read_bytes()
    except OSError as exc:
        raise ParseError(name, f"could not read source file: {exc}") from exc
    return parse_source(source, name)


__all__ = [
    "GoTreeBuilder",
    "get_parser",
    "node_range",
    "parse_file",
    "parse_source",
]
