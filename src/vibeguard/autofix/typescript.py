"""Type erasure for TypeScript component source.

Compilers that expect JavaScript reject TSX annotations, so pipelines that
let the model write TypeScript erase them before compiling. Erasure only
removes text: interfaces, type aliases, annotations, type parameters and
arguments, ``as``/``satisfies`` casts, non-null assertions, modifiers and
type-only imports. Enums and namespaces carry runtime semantics and are
left for the compiler to report.
"""

from __future__ import annotations

import logging

from tree_sitter import Node

from vibeguard.engine.preamble import attach_preamble, split_preamble
from vibeguard.engine.tree import SourceTree

logger = logging.getLogger(__name__)

ERASED_NODES = frozenset({
    "type_annotation",
    "opting_type_annotation",
    "asserts_annotation",
    "type_predicate_annotation",
    "type_parameters",
    "type_arguments",
    "implements_clause",
})
MODIFIER_NODES = frozenset({"accessibility_modifier", "override_modifier"})
TYPE_STATEMENTS = frozenset({
    "interface_declaration",
    "type_alias_declaration",
    "function_signature",
    "ambient_declaration",
})
CAST_NODES = frozenset({"as_expression", "satisfies_expression", "non_null_expression"})

# Anonymous tokens that only exist in TypeScript, by the node that holds them.
_MARKERS: dict[str, frozenset[str]] = {
    "required_parameter": frozenset({"readonly"}),
    "optional_parameter": frozenset({"?", "readonly"}),
    "public_field_definition": frozenset({"?", "!", "readonly"}),
    "variable_declarator": frozenset({"!"}),
}
_KEYWORD_MARKERS = frozenset({"readonly"})


def _remove_with_gap(tree: SourceTree, node: Node) -> None:
    """Remove ``node`` and the whitespace up to its next sibling."""
    following = node.next_sibling
    end = following.start_byte if following is not None else node.end_byte
    tree.delete(node.start_byte, end)


def _type_only(node: Node) -> bool:
    """``import type``, ``export type { }`` or an inline ``type`` specifier."""
    return any(child.type == "type" and not child.is_named for child in node.children)


def _erase_type_specifiers(tree: SourceTree, clause: Node) -> None:
    specifiers = [
        c for c in clause.named_children if c.type in ("import_specifier", "export_specifier")
    ]
    kept = [s for s in specifiers if not _type_only(s)]
    if len(kept) == len(specifiers):
        return
    if kept:
        tree.replace(clause, "{ " + ", ".join(tree.text(s) for s in kept) + " }")
        return
    if clause.type == "named_imports":
        import_clause = clause.parent
        if import_clause is not None and len(import_clause.named_children) > 1:
            tree.replace(clause, "{}")
            return
        statement = import_clause.parent if import_clause is not None else None
    else:
        statement = clause.parent
    if statement is not None:
        tree.remove_statement(statement)


def _erase(tree: SourceTree, node: Node) -> list[Node]:
    """Record the edits for ``node`` and return the children left to visit."""
    kind = node.type
    if kind in ERASED_NODES:
        tree.remove(node)
        return []
    if kind in MODIFIER_NODES:
        _remove_with_gap(tree, node)
        return []
    if kind in TYPE_STATEMENTS:
        parent = node.parent
        exported = parent is not None and parent.type == "export_statement"
        tree.remove_statement(parent if exported else node)
        return []
    if kind in CAST_NODES:
        inner = node.named_children[0]
        tree.delete(inner.end_byte, node.end_byte)
        return [inner]
    if kind in ("import_statement", "export_statement") and _type_only(node):
        tree.remove_statement(node)
        return []
    if kind in ("named_imports", "export_clause"):
        _erase_type_specifiers(tree, node)
        return []
    markers = _MARKERS.get(kind)
    if markers:
        for child in node.children:
            if child.is_named or child.type not in markers:
                continue
            if child.type in _KEYWORD_MARKERS:
                _remove_with_gap(tree, child)
            else:
                tree.remove(child)
    return node.children


def strip_typescript(source: str) -> str:
    """Erase TypeScript-only syntax, leaving JavaScript with JSX.

    Never raises. Source that does not parse, or whose erased form would
    not parse, is returned unchanged, and so is plain JavaScript.

    Args:
        source: Artifact text, with or without a front-matter preamble.

    Returns:
        The artifact with type syntax removed; the preamble is untouched.
    """
    preamble, body = split_preamble(source)
    tree = SourceTree(body)
    if tree.has_errors:
        logger.debug("Type erasure skipped: source does not parse")
        return source

    stack = [tree.root]
    while stack:
        node = stack.pop()
        stack.extend(reversed(_erase(tree, node)))
    if not tree.edited:
        return source

    try:
        erased = tree.render()
    except ValueError as exc:
        logger.warning("Discarding type erasure: %s", exc)
        return source
    if SourceTree(erased).has_errors:
        logger.warning("Discarding type erasure: result does not parse")
        return source
    return attach_preamble(preamble, erased)
