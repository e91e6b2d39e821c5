"""Parse-tree access for generated TSX source.

Wraps a tree-sitter parse of an artifact's code body (the preamble is
never part of it) with the helpers the validator and the auto-fixer
share, plus an edit buffer. Edits are recorded against byte offsets of
the parsed source and applied all at once by ``render()``; the tree
itself is never mutated, so after rendering callers re-parse.

Usage::

    tree = SourceTree(body)
    for node in tree.walk():
        if node.type == "jsx_attribute":
            ...
    tree.replace(node, "onClick")
    new_body = tree.render()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

TSX_LANGUAGE = Language(tree_sitter_typescript.language_tsx())

FUNCTION_TYPES = frozenset({
    "arrow_function",
    "function_expression",
    "function",
    "function_declaration",
    "generator_function_declaration",
})
JSX_ELEMENT_TYPES = frozenset({"jsx_element", "jsx_self_closing_element"})
DECLARATION_TYPES = frozenset({"lexical_declaration", "variable_declaration"})


@dataclass(frozen=True)
class _Edit:
    start: int
    end: int
    text: bytes
    order: int


class SourceTree:
    """A parsed code body with pending byte-range edits.

    Parsers are created per instance; a SourceTree is not shared between
    threads but any number of them can exist concurrently.
    """

    def __init__(self, body: str) -> None:
        self._source = body.encode("utf-8", "surrogatepass")
        self._tree = Parser(TSX_LANGUAGE).parse(self._source)
        self._edits: list[_Edit] = []

    @property
    def root(self) -> Node:
        return self._tree.root_node

    @property
    def source(self) -> bytes:
        return self._source

    @property
    def has_errors(self) -> bool:
        return self.root.has_error

    @property
    def edited(self) -> bool:
        return bool(self._edits)

    def error_line(self) -> int | None:
        """1-based line of the first syntax error, or None."""
        for node in self.walk():
            if node.type == "ERROR" or node.is_missing:
                return self.line_of(node)
        return None

    def walk(self, node: Node | None = None) -> Iterator[Node]:
        """Yield ``node`` (default: the root) and its descendants, pre-order."""
        stack = [node if node is not None else self.root]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.children))

    def text(self, node: Node) -> str:
        raw = self._source[node.start_byte:node.end_byte]
        return raw.decode("utf-8", "surrogatepass")

    def line_of(self, node: Node) -> int:
        return node.start_point[0] + 1

    def line_indent(self, offset: int) -> str:
        """Leading whitespace of the line containing byte ``offset``."""
        line_start = self._source.rfind(b"\n", 0, offset) + 1
        end = line_start
        while end < len(self._source) and self._source[end:end + 1] in (b" ", b"\t"):
            end += 1
        return self._source[line_start:end].decode("utf-8", "surrogatepass")

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def replace(self, node: Node, text: str) -> None:
        self._add(node.start_byte, node.end_byte, text)

    def insert(self, offset: int, text: str) -> None:
        self._add(offset, offset, text)

    def remove(self, node: Node) -> None:
        self._add(node.start_byte, node.end_byte, "")

    def delete(self, start: int, end: int) -> None:
        self._add(start, end, "")

    def remove_statement(self, node: Node) -> None:
        """Remove a statement together with its line, if it is alone on it."""
        start, end = node.start_byte, node.end_byte
        line_start = self._source.rfind(b"\n", 0, start) + 1
        if not self._source[line_start:start].strip():
            start = line_start
        line_end = self._source.find(b"\n", end)
        if line_end == -1:
            if not self._source[end:].strip():
                end = len(self._source)
        elif not self._source[end:line_end].strip():
            end = line_end + 1
        self._add(start, end, "")

    def _add(self, start: int, end: int, text: str) -> None:
        encoded = text.encode("utf-8", "surrogatepass")
        self._edits.append(_Edit(start, end, encoded, len(self._edits)))

    def render(self) -> str:
        """Apply pending edits and return the new body text.

        Insertions at the same offset keep the order they were made in.

        Raises:
            ValueError: If two edits overlap.
        """
        pieces: list[bytes] = []
        cursor = 0
        for edit in sorted(self._edits, key=lambda e: (e.start, e.end, e.order)):
            if edit.start < cursor:
                raise ValueError(
                    f"Overlapping edits at byte {edit.start} (cursor {cursor})"
                )
            pieces.append(self._source[cursor:edit.start])
            pieces.append(edit.text)
            cursor = edit.end
        pieces.append(self._source[cursor:])
        return b"".join(pieces).decode("utf-8", "surrogatepass")


# ----------------------------------------------------------------------
# Node helpers
# ----------------------------------------------------------------------


def significant_children(node: Node) -> list[Node]:
    """Named children, without comments."""
    return [c for c in node.named_children if c.type != "comment"]


def unwrap_parens(node: Node) -> Node:
    while node.type == "parenthesized_expression":
        inner = significant_children(node)
        if not inner:
            break
        node = inner[0]
    return node


def string_value(tree: SourceTree, node: Node) -> str | None:
    """The contents of a string literal node, without quotes."""
    if node.type != "string":
        return None
    return tree.text(node)[1:-1]


def jsx_opening(node: Node) -> Node:
    """The tag node that carries name and attributes of a JSX element."""
    if node.type == "jsx_element":
        return node.child_by_field_name("open_tag") or node.children[0]
    return node


def jsx_tag_name(tree: SourceTree, element: Node) -> str | None:
    """Tag name of a JSX element, or None for fragments."""
    name = jsx_tag_name_node(element)
    return tree.text(name) if name is not None else None


def jsx_tag_name_node(element: Node) -> Node | None:
    opening = jsx_opening(element)
    name = opening.child_by_field_name("name")
    if name is not None:
        return name
    for child in opening.named_children:
        if child.type in ("identifier", "member_expression", "nested_identifier",
                          "jsx_namespace_name"):
            return child
        break
    return None


def jsx_attributes(tree: SourceTree, element: Node) -> dict[str, Node]:
    """Map attribute name to its jsx_attribute node (spreads excluded)."""
    attrs: dict[str, Node] = {}
    for child in jsx_opening(element).named_children:
        if child.type != "jsx_attribute" or not child.named_children:
            continue
        attrs[tree.text(child.named_children[0])] = child
    return attrs


def jsx_attribute_value(tree: SourceTree, attribute: Node) -> str | None:
    """Literal string value of a JSX attribute, or None when not a literal."""
    parts = attribute.named_children
    if len(parts) < 2:
        return None
    return string_value(tree, parts[1])


def function_body(node: Node) -> Node | None:
    """Body of a function-like node: a statement block or an expression."""
    if node.type not in FUNCTION_TYPES:
        return None
    return node.child_by_field_name("body")


def identifier_names(tree: SourceTree, node: Node) -> set[str]:
    """Every identifier spelled anywhere inside ``node``."""
    return {
        tree.text(n)
        for n in tree.walk(node)
        if n.type in ("identifier", "shorthand_property_identifier",
                      "shorthand_property_identifier_pattern")
    }


def call_arguments(call: Node) -> list[Node]:
    """Argument expressions of a call or ``new`` expression."""
    args = call.child_by_field_name("arguments")
    if args is None:
        return []
    return significant_children(args)
