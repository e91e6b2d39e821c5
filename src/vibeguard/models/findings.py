"""Validation findings and reports.

A ValidationReport is a pure value derived from its findings: the error
and warning lists are views over ``findings`` and ``is_valid`` holds
exactly when there are no error-severity findings.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Severity(str, enum.Enum):
    """How a finding affects acceptance of an artifact."""

    ERROR = "error"
    WARNING = "warning"


class FindingCategory(str, enum.Enum):
    """What kind of rule produced a finding."""

    PARSE_ERROR = "parse_error"
    FORBIDDEN_IMPORT = "forbidden_import"
    SECURITY_VIOLATION = "security_violation"
    ACCESSIBILITY = "accessibility"


@dataclass(frozen=True)
class ValidationFinding:
    """A single problem found in generated source.

    Attributes:
        severity: ERROR findings block acceptance, WARNING findings don't.
        message: Human-readable description, including the source line.
        category: The rule family that produced the finding.
        line: 1-based line in the code body, or None when unknown.
    """

    severity: Severity
    message: str
    category: FindingCategory
    line: int | None = None

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of validating one artifact."""

    findings: tuple[ValidationFinding, ...] = ()

    @property
    def errors(self) -> list[str]:
        return [f.message for f in self.findings if f.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[str]:
        return [f.message for f in self.findings if f.severity == Severity.WARNING]

    @property
    def is_valid(self) -> bool:
        return not any(f.is_error for f in self.findings)

    def by_category(self, category: FindingCategory) -> list[ValidationFinding]:
        """Return the findings produced by one rule family."""
        return [f for f in self.findings if f.category == category]

    def to_dict(self) -> dict:
        """Serialize to a plain dict (errors, warnings, is_valid)."""
        return {
            "is_valid": self.is_valid,
            "errors": self.errors,
            "warnings": self.warnings,
        }

    def __str__(self) -> str:
        status = "valid" if self.is_valid else "invalid"
        return (
            f"{status}: {len(self.errors)} error(s), "
            f"{len(self.warnings)} warning(s)"
        )
