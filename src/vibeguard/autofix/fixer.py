"""Deterministic auto-fixer.

Runs the transforms in a fixed order. After a transform that edited the
tree, the result is rendered and re-parsed so the next transform sees
the repaired source. The preamble never enters the tree and is put back
verbatim.
"""

from __future__ import annotations

import logging

from vibeguard.autofix.transforms import TRANSFORMS
from vibeguard.engine.preamble import attach_preamble, split_preamble
from vibeguard.engine.tree import SourceTree
from vibeguard.models.fixes import AutoFixResult

logger = logging.getLogger(__name__)


def autofix(source: str) -> AutoFixResult:
    """Repair known structural defects in generated source.

    Never raises. Source that cannot be parsed is returned unchanged with
    no fixes. Applying ``autofix`` to its own output yields no fixes.

    Args:
        source: Artifact text, with or without a front-matter preamble.

    Returns:
        AutoFixResult with the (possibly) transformed code and one record
        per applied fix.
    """
    preamble, body = split_preamble(source)
    tree = SourceTree(body)
    if tree.has_errors:
        logger.debug("Auto-fix skipped: source does not parse")
        return AutoFixResult(code=source)

    fixes: list[str] = []
    for name, transform in TRANSFORMS:
        stage_fixes = transform(tree)
        if not tree.edited:
            continue
        try:
            candidate = tree.render()
        except ValueError as exc:
            logger.warning("Discarding %s fixes: %s", name, exc)
            tree = SourceTree(body)
            continue
        reparsed = SourceTree(candidate)
        if reparsed.has_errors:
            logger.warning("Discarding %s fixes: result does not parse", name)
            tree = SourceTree(body)
            continue
        for fix in stage_fixes:
            logger.debug("Applied fix: %s", fix)
        fixes.extend(stage_fixes)
        body, tree = candidate, reparsed

    if not fixes:
        return AutoFixResult(code=source)
    return AutoFixResult(code=attach_preamble(preamble, body), fixes=tuple(fixes))
