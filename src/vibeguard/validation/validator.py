"""Static validator for generated component source.

``validate()`` is pure: it never raises, never short-circuits, and returns
the same report for the same source and policy. Unparsable source yields a
single parse error and nothing else, since none of the structural checks
are meaningful on a broken tree.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable

from vibeguard.engine.preamble import split_preamble
from vibeguard.engine.tree import SourceTree, string_value
from vibeguard.models.config import ValidationPolicy
from vibeguard.models.findings import (
    FindingCategory,
    Severity,
    ValidationFinding,
    ValidationReport,
)
from vibeguard.validation.rules import DEFAULT_RULES, Rule, RuleContext

logger = logging.getLogger(__name__)

PARSE_ERROR_PREFIX = "Source could not be parsed"


def validate(
    source: str,
    policy: ValidationPolicy | None = None,
    *,
    rules: Iterable[Rule] = DEFAULT_RULES,
) -> ValidationReport:
    """Check generated source against the policy and the rule set.

    Args:
        source: Artifact text, with or without a front-matter preamble.
        policy: Import policy. Defaults to ``ValidationPolicy()``.
        rules: Rule descriptors to evaluate. Defaults to all built-in rules.

    Returns:
        A ValidationReport; ``is_valid`` is False iff any error was found.
    """
    policy = policy or ValidationPolicy()
    _, body = split_preamble(source)
    tree = SourceTree(body)

    if tree.has_errors:
        line = tree.error_line()
        message = PARSE_ERROR_PREFIX
        if line is not None:
            message += f": syntax error near line {line}"
        logger.debug("Validation aborted: %s", message)
        return ValidationReport((
            ValidationFinding(Severity.ERROR, message, FindingCategory.PARSE_ERROR, line),
        ))

    by_type: dict[str, list[Rule]] = defaultdict(list)
    for rule in rules:
        for node_type in rule.node_types:
            by_type[node_type].append(rule)

    ctx = RuleContext(tree=tree, policy=policy)
    findings: list[ValidationFinding] = []
    for node in tree.walk():
        for rule in by_type.get(node.type, ()):
            message = rule.check(node, ctx)
            if message is not None:
                findings.append(rule.finding(message, tree.line_of(node)))
    findings.extend(ctx.finish())

    report = ValidationReport(tuple(findings))
    logger.debug(
        "Validated %d bytes: %d error(s), %d warning(s)",
        len(body), len(report.errors), len(report.warnings),
    )
    return report


def extract_imports(source: str) -> list[str]:
    """Module specifiers imported or re-exported by ``source``, in order.

    Returns an empty list when the source cannot be parsed.
    """
    _, body = split_preamble(source)
    tree = SourceTree(body)
    if tree.has_errors:
        return []
    specifiers: list[str] = []
    for node in tree.root.named_children:
        if node.type not in ("import_statement", "export_statement"):
            continue
        src = node.child_by_field_name("source")
        value = string_value(tree, src) if src is not None else None
        if value is not None:
            specifiers.append(value)
    return specifiers
