"""Import policy matching.

A module specifier is allowed when it is project-relative, starts with a
project alias prefix, or matches an allow-list entry of the policy.
"""

from __future__ import annotations

from vibeguard.models.config import ValidationPolicy


def is_relative(specifier: str) -> bool:
    """True for ``./x``, ``../x`` and ``/x``; protocol-relative URLs excluded."""
    if specifier.startswith("//"):
        return False
    return specifier.startswith((".", "/"))


def matches_entry(specifier: str, entry: str) -> bool:
    """Check one allow-list entry.

    ``react`` matches ``react`` and ``react/client`` but not ``react-dom``;
    ``@radix-ui/*`` matches anything starting with ``@radix-ui/``.
    """
    if entry.endswith("*"):
        return specifier.startswith(entry[:-1])
    return specifier == entry or specifier.startswith(entry + "/")


def is_allowed_import(specifier: str, policy: ValidationPolicy) -> bool:
    if not specifier:
        return False
    if is_relative(specifier):
        return True
    if any(specifier.startswith(prefix) for prefix in policy.local_prefixes()):
        return True
    return any(matches_entry(specifier, entry) for entry in policy.allowed_imports)


def describe_violation(specifier: str, policy: ValidationPolicy) -> str:
    allowed = ", ".join(policy.allowed_imports) or "none"
    return (
        f'Import from "{specifier}" is not allowed. Only relative imports, '
        f"project aliases and these packages may be imported: {allowed}"
    )
