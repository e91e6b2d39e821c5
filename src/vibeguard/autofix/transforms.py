"""Mechanical repairs applied to generated component source.

Each transform inspects a parsed ``SourceTree``, records edits on it, and
returns one human-readable record per repair. Transforms only ever add to
or move existing code; nothing the model wrote is dropped.
"""

from __future__ import annotations

from typing import Callable

from tree_sitter import Node

from vibeguard.engine.tree import (
    DECLARATION_TYPES,
    FUNCTION_TYPES,
    JSX_ELEMENT_TYPES,
    SourceTree,
    call_arguments,
    function_body,
    identifier_names,
    jsx_attributes,
    jsx_tag_name_node,
    significant_children,
    string_value,
    unwrap_parens,
)

Transform = Callable[[SourceTree], "list[str]"]

BASE_LIBRARY = "react"
BASE_IMPORT = "import React from 'react';\n"
INDEX_NAMES = ("index", "idx", "i")
INDENT_STEP = "  "

HANDLER_RENAMES: dict[str, str] = {
    "onclick": "onClick",
    "onchange": "onChange",
    "onsubmit": "onSubmit",
    "oninput": "onInput",
    "onfocus": "onFocus",
    "onblur": "onBlur",
    "onkeydown": "onKeyDown",
    "onkeyup": "onKeyUp",
    "onkeypress": "onKeyPress",
    "onmouseenter": "onMouseEnter",
    "onmouseleave": "onMouseLeave",
    "onmouseover": "onMouseOver",
    "onmouseout": "onMouseOut",
    "ondoubleclick": "onDoubleClick",
}


# ---------------------------------------------------------------------------
# Declaration hoisting
# ---------------------------------------------------------------------------


def _exported_function(tree: SourceTree, export: Node) -> tuple[str, Node] | None:
    """``(name, function node)`` when an export statement defines a function."""
    declaration = export.child_by_field_name("declaration")
    if declaration is not None:
        if declaration.type in ("function_declaration", "generator_function_declaration"):
            name = declaration.child_by_field_name("name")
            return (tree.text(name) if name is not None else "default", declaration)
        if declaration.type in DECLARATION_TYPES:
            for declarator in declaration.named_children:
                if declarator.type != "variable_declarator":
                    continue
                value = declarator.child_by_field_name("value")
                if value is not None and unwrap_parens(value).type in FUNCTION_TYPES:
                    name = declarator.child_by_field_name("name")
                    return (tree.text(name), unwrap_parens(value))
        return None
    value = export.child_by_field_name("value")
    if value is not None and unwrap_parens(value).type in FUNCTION_TYPES:
        return ("default", unwrap_parens(value))
    return None


def _declaration_kind(tree: SourceTree, declaration: Node) -> str:
    if declaration.type == "variable_declaration":
        return "var"
    return tree.text(declaration.children[0])


def _declared_names(tree: SourceTree, declaration: Node) -> list[str]:
    names = []
    for declarator in declaration.named_children:
        if declarator.type == "variable_declarator":
            name = declarator.child_by_field_name("name")
            if name is not None:
                names.append(tree.text(name))
    return names


def _reindented(tree: SourceTree, node: Node, indent: str) -> str:
    """Source of ``node`` shifted right by ``indent``.

    Lines that start inside a template literal are left alone, since their
    leading whitespace is part of the string.
    """
    literals = [
        (n.start_byte, n.end_byte) for n in tree.walk(node) if n.type == "template_string"
    ]
    lines = tree.text(node).split("\n")
    offset = node.start_byte + len(lines[0].encode("utf-8", "surrogatepass")) + 1
    out = [indent + lines[0]]
    for line in lines[1:]:
        in_literal = any(start < offset < end for start, end in literals)
        out.append(line if in_literal or not line.strip() else indent + line)
        offset += len(line.encode("utf-8", "surrogatepass")) + 1
    return "\n".join(out)


def hoist_declarations(tree: SourceTree) -> list[str]:
    """Move top-level variable declarations into the first exported function.

    Generated artifacts often declare data next to the component instead
    of inside it, which the compiler rejects. Expression-bodied arrows are
    converted to block bodies so the declarations have somewhere to go.
    Without an exported function the declarations stay where they are.
    """
    program = tree.root
    declarations = [c for c in program.named_children if c.type in DECLARATION_TYPES]
    if not declarations:
        return []

    target = None
    for child in program.named_children:
        if child.type == "export_statement":
            target = _exported_function(tree, child)
            if target is not None:
                break
    if target is None:
        return []
    target_name, function = target
    body = function_body(function)
    if body is None:
        return []

    if body.type == "statement_block":
        statements = significant_children(body)
        if statements and statements[0].start_point[0] != body.start_point[0]:
            indent = tree.line_indent(statements[0].start_byte)
        else:
            indent = tree.line_indent(body.start_byte) + INDENT_STEP
        hoisted = "".join("\n" + _reindented(tree, d, indent) for d in declarations)
        tree.insert(body.children[0].end_byte, hoisted)
    else:
        base = tree.line_indent(function.start_byte)
        indent = base + INDENT_STEP
        hoisted = "\n".join(_reindented(tree, d, indent) for d in declarations)
        tree.replace(
            body,
            f"{{\n{hoisted}\n{indent}return {tree.text(body)};\n{base}}}",
        )

    fixes = []
    for declaration in declarations:
        tree.remove_statement(declaration)
        names = ", ".join(_declared_names(tree, declaration)) or "<pattern>"
        fixes.append(
            f"Hoisted top-level {_declaration_kind(tree, declaration)} declaration "
            f"of {names} into {target_name}"
        )
    return fixes


# ---------------------------------------------------------------------------
# Keys for mapped elements
# ---------------------------------------------------------------------------


def _returned_element(tree: SourceTree, callback: Node) -> Node | None:
    """The JSX element a map callback renders, if it renders exactly one."""
    body = function_body(callback)
    if body is None:
        return None
    if body.type == "statement_block":
        returns = [s for s in significant_children(body) if s.type == "return_statement"]
        if len(returns) != 1:
            return None
        values = significant_children(returns[0])
        if not values:
            return None
        body = values[0]
    element = unwrap_parens(body)
    return element if element.type in JSX_ELEMENT_TYPES else None


def _parameter_pattern(parameter: Node) -> Node | None:
    if parameter.type == "rest_pattern":
        return parameter
    if parameter.type in ("required_parameter", "optional_parameter"):
        return parameter.child_by_field_name("pattern")
    if parameter.type == "identifier":
        return parameter
    return None


def _fresh_name(tree: SourceTree, scope: Node) -> str:
    taken = identifier_names(tree, scope)
    for name in INDEX_NAMES:
        if name not in taken:
            return name
    n = 1
    while f"index{n}" in taken:
        n += 1
    return f"index{n}"


def _ensure_index_parameter(tree: SourceTree, callback: Node) -> str | None:
    """Name of the callback's index parameter, adding one when missing.

    Returns None when the second parameter is a destructuring pattern, or
    when the only parameter is a rest parameter, which must stay last.
    """
    bare = callback.child_by_field_name("parameter")
    if bare is not None:
        name = _fresh_name(tree, callback)
        tree.replace(bare, f"({tree.text(bare)}, {name})")
        return name

    parameters = callback.child_by_field_name("parameters")
    if parameters is None:
        return None
    items = significant_children(parameters)
    if len(items) >= 2:
        pattern = _parameter_pattern(items[1])
        if pattern is None or pattern.type != "identifier":
            return None
        return tree.text(pattern)

    name = _fresh_name(tree, callback)
    if items:
        first = _parameter_pattern(items[0])
        if first is not None and first.type == "rest_pattern":
            return None
        typed = items[0].child_by_field_name("type") is not None
        tree.insert(items[0].end_byte, f", {name}: number" if typed else f", {name}")
    else:
        tree.insert(parameters.children[0].end_byte, f"_item, {name}")
    return name


def add_list_keys(tree: SourceTree) -> list[str]:
    """Give elements rendered by ``.map()`` callbacks a synthesized key.

    The key is derived from the element's position, so it is unique among
    its siblings only.
    """
    fixes = []
    for node in tree.walk():
        if node.type != "call_expression":
            continue
        function = node.child_by_field_name("function")
        if function is None or function.type != "member_expression":
            continue
        prop = function.child_by_field_name("property")
        if prop is None or tree.text(prop) != "map":
            continue
        args = call_arguments(node)
        if not args or args[0].type not in FUNCTION_TYPES:
            continue
        callback = args[0]
        element = _returned_element(tree, callback)
        if element is None:
            continue
        tag = jsx_tag_name_node(element)
        if tag is None or "key" in jsx_attributes(tree, element):
            continue
        index = _ensure_index_parameter(tree, callback)
        if index is None:
            continue
        anchor = tag
        if tag.next_sibling is not None and tag.next_sibling.type == "type_arguments":
            anchor = tag.next_sibling
        tree.insert(anchor.end_byte, " key={`item-${" + index + "}`}")
        fixes.append(f"Added key to <{tree.text(tag)}> rendered by map()")
    return fixes


# ---------------------------------------------------------------------------
# Event handler names
# ---------------------------------------------------------------------------


def normalize_event_handlers(tree: SourceTree) -> list[str]:
    """Rename lowercase DOM handler attributes to their camel-case props."""
    fixes = []
    for node in tree.walk():
        if node.type != "jsx_attribute" or not node.named_children:
            continue
        name = node.named_children[0]
        if name.type != "property_identifier":
            continue
        old = tree.text(name)
        new = HANDLER_RENAMES.get(old)
        if new is not None:
            tree.replace(name, new)
            fixes.append(f"Converted {old} to {new}")
    return fixes


# ---------------------------------------------------------------------------
# Base import
# ---------------------------------------------------------------------------


def _imports_base_library(tree: SourceTree) -> bool:
    for node in tree.root.named_children:
        if node.type != "import_statement":
            continue
        source = node.child_by_field_name("source")
        if source is not None and string_value(tree, source) == BASE_LIBRARY:
            return True
    return False


def _is_directive(node: Node) -> bool:
    """``'use client';`` and other bare string statements."""
    if node.type != "expression_statement":
        return False
    parts = significant_children(node)
    return len(parts) == 1 and parts[0].type == "string"


def _last_directive(tree: SourceTree) -> Node | None:
    """Final statement of the directive prologue, if the module has one."""
    last = None
    for node in tree.root.named_children:
        if node.type == "comment":
            continue
        if not _is_directive(node):
            break
        last = node
    return last


def ensure_base_import(tree: SourceTree) -> list[str]:
    """Import React when JSX is used without it.

    The import goes after any directive prologue, since a directive only
    counts as one before the first statement.
    """
    has_jsx = any(node.type in JSX_ELEMENT_TYPES for node in tree.walk())
    if not has_jsx or _imports_base_library(tree):
        return []
    directive = _last_directive(tree)
    if directive is None:
        tree.insert(0, BASE_IMPORT)
    else:
        tree.insert(directive.end_byte, "\n" + BASE_IMPORT.rstrip("\n"))
    return ["Added missing React import"]


TRANSFORMS: tuple[tuple[str, Transform], ...] = (
    ("hoist-declarations", hoist_declarations),
    ("list-keys", add_list_keys),
    ("event-handlers", normalize_event_handlers),
    ("base-import", ensure_base_import),
)
