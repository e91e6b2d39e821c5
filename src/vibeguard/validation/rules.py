"""Validation rule descriptors.

Every check is a ``Rule``: a name, a category, a severity, the node types
it inspects, and a check function returning a message (or None). The
validator walks the tree once and hands each node to the rules registered
for its type, so adding a rule never adds a traversal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from tree_sitter import Node

from vibeguard.engine.tree import (
    JSX_ELEMENT_TYPES,
    SourceTree,
    call_arguments,
    jsx_attribute_value,
    jsx_attributes,
    jsx_opening,
    jsx_tag_name,
    string_value,
)
from vibeguard.models.config import ValidationPolicy
from vibeguard.models.findings import FindingCategory, Severity, ValidationFinding
from vibeguard.validation.imports import describe_violation, is_allowed_import

GLOBAL_RECEIVERS = frozenset({"window", "globalThis", "self"})
PRIVILEGED_GLOBALS = frozenset({"process", "global", "globalThis"})
WINDOW_RECEIVERS = GLOBAL_RECEIVERS - PRIVILEGED_GLOBALS
NETWORK_CONSTRUCTORS = frozenset({"XMLHttpRequest", "WebSocket", "EventSource"})
STORAGE_GLOBALS = frozenset({"localStorage", "sessionStorage"})
KEYBOARD_HANDLERS = frozenset({"onKeyDown", "onKeyUp", "onKeyPress"})
LABEL_ATTRIBUTES = frozenset({"aria-label", "aria-labelledby", "title"})
UNLABELLED_INPUT_TYPES = frozenset({"hidden", "submit", "button", "reset", "image"})

_ASSIGNMENTS = frozenset({"assignment_expression", "augmented_assignment_expression"})


@dataclass
class RuleContext:
    """Per-run state shared by rules during a single traversal.

    Label associations through ``htmlFor`` can point forward, so form
    controls that carry an ``id`` are judged after the walk.
    """

    tree: SourceTree
    policy: ValidationPolicy
    label_targets: set[str] = field(default_factory=set)
    pending_controls: list[tuple[str, ValidationFinding]] = field(default_factory=list)

    def defer(self, control_id: str, finding: ValidationFinding) -> None:
        """Report ``finding`` unless some label points at ``control_id``."""
        self.pending_controls.append((control_id, finding))

    def finish(self) -> list[ValidationFinding]:
        return [
            finding
            for control_id, finding in self.pending_controls
            if control_id not in self.label_targets
        ]


RuleCheck = Callable[[Node, RuleContext], "str | None"]


@dataclass(frozen=True)
class Rule:
    """A tagged validation check."""

    name: str
    category: FindingCategory
    severity: Severity
    node_types: frozenset[str]
    check: RuleCheck

    def finding(self, message: str, line: int | None) -> ValidationFinding:
        if line is not None:
            message = f"{message} (line {line})"
        return ValidationFinding(self.severity, message, self.category, line)


# ---------------------------------------------------------------------------
# Node helpers
# ---------------------------------------------------------------------------


def dotted_name(tree: SourceTree, node: Node | None) -> str | None:
    """``window.location.href`` for a member chain of plain names, else None."""
    if node is None:
        return None
    if node.type in ("identifier", "this"):
        return tree.text(node)
    if node.type == "member_expression":
        obj = dotted_name(tree, node.child_by_field_name("object"))
        prop = node.child_by_field_name("property")
        if obj is None or prop is None or prop.type != "property_identifier":
            return None
        return f"{obj}.{tree.text(prop)}"
    if node.type == "subscript_expression":
        obj = dotted_name(tree, node.child_by_field_name("object"))
        index = node.child_by_field_name("index")
        key = string_value(tree, index) if index is not None else None
        if obj is None or key is None:
            return None
        return f"{obj}.{key}"
    return None


def callee_name(tree: SourceTree, call: Node) -> str | None:
    """Name a call resolves to, looking through global receivers.

    ``fetch(x)`` and ``window.fetch(x)`` both give ``fetch``;
    ``api.fetch(x)`` gives ``api.fetch``.
    """
    name = dotted_name(tree, call.child_by_field_name("function"))
    if name is None:
        return None
    receiver, _, rest = name.partition(".")
    if rest and receiver in GLOBAL_RECEIVERS and "." not in rest:
        return rest
    return name


def constructor_name(tree: SourceTree, new: Node) -> str | None:
    name = dotted_name(tree, new.child_by_field_name("constructor"))
    if name is None:
        return None
    receiver, _, rest = name.partition(".")
    if rest and receiver in GLOBAL_RECEIVERS:
        return rest
    return name


def _first_argument(call: Node) -> Node | None:
    args = call_arguments(call)
    return args[0] if args else None


def _assignment_target(tree: SourceTree, node: Node) -> str | None:
    return dotted_name(tree, node.child_by_field_name("left"))


def _has_spread(element: Node) -> bool:
    return any(
        child.type == "jsx_expression" for child in jsx_opening(element).named_children
    )


# ---------------------------------------------------------------------------
# Import policy
# ---------------------------------------------------------------------------


def _check_import(node: Node, ctx: RuleContext) -> str | None:
    source = node.child_by_field_name("source")
    if source is None:
        return None
    specifier = string_value(ctx.tree, source)
    if specifier is None or is_allowed_import(specifier, ctx.policy):
        return None
    return describe_violation(specifier, ctx.policy)


# ---------------------------------------------------------------------------
# Dynamic code and network primitives
# ---------------------------------------------------------------------------


def _check_eval(node: Node, ctx: RuleContext) -> str | None:
    if callee_name(ctx.tree, node) == "eval":
        return "Use of eval() is forbidden"
    return None


def _check_function_constructor(node: Node, ctx: RuleContext) -> str | None:
    if node.type == "new_expression":
        name = constructor_name(ctx.tree, node)
    else:
        name = callee_name(ctx.tree, node)
    if name == "Function":
        return "Use of the Function constructor is forbidden"
    return None


def _check_require(node: Node, ctx: RuleContext) -> str | None:
    if callee_name(ctx.tree, node) == "require":
        return "Use of require() is forbidden - use ES module imports instead"
    return None


def _check_dynamic_import(node: Node, ctx: RuleContext) -> str | None:
    function = node.child_by_field_name("function")
    if function is not None and function.type == "import":
        return "Dynamic import() is forbidden"
    return None


def _check_string_timer(node: Node, ctx: RuleContext) -> str | None:
    name = callee_name(ctx.tree, node)
    if name not in ("setTimeout", "setInterval"):
        return None
    first = _first_argument(node)
    if first is not None and first.type in ("string", "template_string"):
        return f"Passing a string to {name}() evaluates it as code and is forbidden"
    return None


def _check_fetch(node: Node, ctx: RuleContext) -> str | None:
    name = callee_name(ctx.tree, node)
    if name == "fetch":
        return "Direct fetch() calls are forbidden - use the provided utility functions instead"
    if name == "navigator.sendBeacon":
        return "navigator.sendBeacon() is forbidden"
    return None


def _check_network_constructor(node: Node, ctx: RuleContext) -> str | None:
    name = constructor_name(ctx.tree, node)
    if name in NETWORK_CONSTRUCTORS:
        return f"{name} is forbidden - use the provided utility functions instead"
    return None


# ---------------------------------------------------------------------------
# Privileged state
# ---------------------------------------------------------------------------


def _check_privileged_global(node: Node, ctx: RuleContext) -> str | None:
    name = ctx.tree.text(node)
    if name in PRIVILEGED_GLOBALS:
        return f"Access to the {name} object is forbidden"
    return None


def _check_privileged_member(node: Node, ctx: RuleContext) -> str | None:
    """``window.process`` and friends; bare names are caught per identifier."""
    name = dotted_name(ctx.tree, node)
    if name is None:
        return None
    receiver, _, rest = name.partition(".")
    if receiver in WINDOW_RECEIVERS and rest in PRIVILEGED_GLOBALS:
        return f"Access to the {rest} object is forbidden"
    return None


def _check_cookie_write(node: Node, ctx: RuleContext) -> str | None:
    if _assignment_target(ctx.tree, node) in ("document.cookie", "window.document.cookie"):
        return "Writing document.cookie is forbidden"
    return None


def _check_location_assignment(node: Node, ctx: RuleContext) -> str | None:
    target = _assignment_target(ctx.tree, node)
    if target is None:
        return None
    for prefix in ("window.location", "document.location", "location"):
        if target == prefix or target == f"{prefix}.href":
            return "Direct window.location manipulation is forbidden"
    return None


def _check_markup_assignment(node: Node, ctx: RuleContext) -> str | None:
    left = node.child_by_field_name("left")
    if left is None or left.type != "member_expression":
        return None
    prop = left.child_by_field_name("property")
    if prop is None:
        return None
    name = ctx.tree.text(prop)
    if name in ("innerHTML", "outerHTML"):
        return f"Assignment to {name} is forbidden - render markup with components instead"
    return None


def _check_markup_call(node: Node, ctx: RuleContext) -> str | None:
    name = callee_name(ctx.tree, node)
    if name in ("document.write", "document.writeln"):
        return f"{name}() is forbidden"
    function = node.child_by_field_name("function")
    if function is not None and function.type == "member_expression":
        prop = function.child_by_field_name("property")
        if prop is not None and ctx.tree.text(prop) == "insertAdjacentHTML":
            return "insertAdjacentHTML() is forbidden - render markup with components instead"
    return None


def _check_storage(node: Node, ctx: RuleContext) -> str | None:
    obj = node.child_by_field_name("object")
    prop = node.child_by_field_name("property")
    if obj is None:
        return None
    if obj.type == "identifier" and ctx.tree.text(obj) in STORAGE_GLOBALS:
        name = ctx.tree.text(obj)
    elif (
        obj.type == "identifier"
        and ctx.tree.text(obj) in GLOBAL_RECEIVERS
        and prop is not None
        and ctx.tree.text(prop) in STORAGE_GLOBALS
    ):
        name = ctx.tree.text(prop)
    else:
        return None
    return f"{name} usage detected - ensure no sensitive data is stored"


def _check_dangerous_html(node: Node, ctx: RuleContext) -> str | None:
    if not node.named_children:
        return None
    if ctx.tree.text(node.named_children[0]) == "dangerouslySetInnerHTML":
        return "dangerouslySetInnerHTML bypasses escaping - make sure the content is sanitized"
    return None


# ---------------------------------------------------------------------------
# Accessibility
# ---------------------------------------------------------------------------


def _check_clickable_without_keyboard(node: Node, ctx: RuleContext) -> str | None:
    tag = jsx_tag_name(ctx.tree, node)
    if tag not in ("div", "span"):
        return None
    attrs = jsx_attributes(ctx.tree, node)
    if "onClick" not in attrs or "role" in attrs or KEYBOARD_HANDLERS & attrs.keys():
        return None
    return (
        f"<{tag}> with onClick should have a keyboard handler (onKeyDown) "
        f"or a role attribute"
    )


def _check_missing_alt(node: Node, ctx: RuleContext) -> str | None:
    tag = jsx_tag_name(ctx.tree, node)
    if tag not in ("img", "area") or _has_spread(node):
        return None
    if "alt" in jsx_attributes(ctx.tree, node):
        return None
    return f"<{tag}> is missing an alt attribute"


def _inside_label(ctx: RuleContext, node: Node) -> bool:
    parent = node.parent
    while parent is not None:
        if parent.type == "jsx_element" and jsx_tag_name(ctx.tree, parent) == "label":
            return True
        parent = parent.parent
    return False


def _check_form_label(node: Node, ctx: RuleContext) -> str | None:
    tag = jsx_tag_name(ctx.tree, node)
    attrs = jsx_attributes(ctx.tree, node)
    if tag == "label":
        target = attrs.get("htmlFor")
        value = jsx_attribute_value(ctx.tree, target) if target is not None else None
        if value:
            ctx.label_targets.add(value)
        return None
    if tag not in ("input", "textarea", "select") or _has_spread(node):
        return None
    if tag == "input":
        input_type = attrs.get("type")
        if (
            input_type is not None
            and jsx_attribute_value(ctx.tree, input_type) in UNLABELLED_INPUT_TYPES
        ):
            return None
    if LABEL_ATTRIBUTES & attrs.keys() or _inside_label(ctx, node):
        return None
    message = f"<{tag}> should have an associated label, aria-label or aria-labelledby"
    id_attr = attrs.get("id")
    control_id = jsx_attribute_value(ctx.tree, id_attr) if id_attr is not None else None
    if control_id:
        line = ctx.tree.line_of(node)
        ctx.defer(
            control_id,
            ValidationFinding(_WARNING, f"{message} (line {line})", _A11Y, line),
        )
        return None
    return message


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_ERROR = Severity.ERROR
_WARNING = Severity.WARNING
_SECURITY = FindingCategory.SECURITY_VIOLATION
_A11Y = FindingCategory.ACCESSIBILITY
_CALL = frozenset({"call_expression"})
_NEW = frozenset({"new_expression"})
_MEMBER = frozenset({"member_expression", "subscript_expression"})
_REFERENCE = frozenset({"identifier", "shorthand_property_identifier"})

DEFAULT_RULES: tuple[Rule, ...] = (
    Rule("import-policy", FindingCategory.FORBIDDEN_IMPORT, _ERROR,
         frozenset({"import_statement", "export_statement"}), _check_import),
    Rule("no-eval", _SECURITY, _ERROR, _CALL, _check_eval),
    Rule("no-function-constructor", _SECURITY, _ERROR, _CALL | _NEW,
         _check_function_constructor),
    Rule("no-require", _SECURITY, _ERROR, _CALL, _check_require),
    Rule("no-dynamic-import", _SECURITY, _ERROR, _CALL, _check_dynamic_import),
    Rule("no-string-timer", _SECURITY, _ERROR, _CALL, _check_string_timer),
    Rule("no-fetch", _SECURITY, _ERROR, _CALL, _check_fetch),
    Rule("no-network-constructor", _SECURITY, _ERROR, _NEW, _check_network_constructor),
    Rule("no-privileged-global", _SECURITY, _ERROR, _REFERENCE, _check_privileged_global),
    Rule("no-privileged-member", _SECURITY, _ERROR, _MEMBER, _check_privileged_member),
    Rule("no-cookie-write", _SECURITY, _ERROR, _ASSIGNMENTS, _check_cookie_write),
    Rule("no-location-assignment", _SECURITY, _ERROR, _ASSIGNMENTS,
         _check_location_assignment),
    Rule("no-markup-assignment", _SECURITY, _ERROR, _ASSIGNMENTS, _check_markup_assignment),
    Rule("no-markup-injection", _SECURITY, _ERROR, _CALL, _check_markup_call),
    Rule("storage-access", _SECURITY, _WARNING, _MEMBER, _check_storage),
    Rule("dangerous-inner-html", _SECURITY, _WARNING, frozenset({"jsx_attribute"}),
         _check_dangerous_html),
    Rule("clickable-without-keyboard", _A11Y, _WARNING, JSX_ELEMENT_TYPES,
         _check_clickable_without_keyboard),
    Rule("img-alt", _A11Y, _WARNING, JSX_ELEMENT_TYPES, _check_missing_alt),
    Rule("form-control-label", _A11Y, _WARNING, JSX_ELEMENT_TYPES, _check_form_label),
)
