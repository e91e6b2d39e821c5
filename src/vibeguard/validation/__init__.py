"""Static validation of generated component source."""

from vibeguard.validation.imports import is_allowed_import
from vibeguard.validation.rules import DEFAULT_RULES, Rule, RuleContext
from vibeguard.validation.validator import PARSE_ERROR_PREFIX, extract_imports, validate

__all__ = [
    "DEFAULT_RULES",
    "PARSE_ERROR_PREFIX",
    "Rule",
    "RuleContext",
    "extract_imports",
    "is_allowed_import",
    "validate",
]
