"""Validation policy configuration.

Pydantic model describing which module specifiers generated code may
import. Frozen so a single policy can be shared across concurrent runs.
"""

from __future__ import annotations

from pydantic import BaseModel, field_validator

DEFAULT_ALLOWED_IMPORTS: tuple[str, ...] = ("react", "react-dom", "react/jsx-runtime")
DEFAULT_ALIAS_PREFIXES: tuple[str, ...] = ("@/", "~/", "#/")


class ValidationPolicy(BaseModel):
    """Import allow-list and project alias configuration.

    Attributes:
        allowed_imports: Package specifiers generated code may import.
            An entry matches exactly, any ``entry/...`` sub-path, or, when
            it ends in ``*``, any specifier starting with the rest.
        alias_prefixes: Prefixes that always denote project-local modules.
        aliases: Path alias mapping as found in a tsconfig ``paths`` block
            (``{"@components/*": "src/components/*"}``). Keys act as
            additional project-local prefixes.
    """

    allowed_imports: tuple[str, ...] = DEFAULT_ALLOWED_IMPORTS
    alias_prefixes: tuple[str, ...] = DEFAULT_ALIAS_PREFIXES
    aliases: dict[str, str] = {}

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("allowed_imports", "alias_prefixes")
    @classmethod
    def _no_empty_entries(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if any(not entry for entry in v):
            raise ValueError("entries must be non-empty strings")
        return v

    def with_allowed(self, *specifiers: str) -> ValidationPolicy:
        """Return a copy with extra allow-list entries."""
        merged = tuple(dict.fromkeys(self.allowed_imports + specifiers))
        return self.model_copy(update={"allowed_imports": merged})

    def local_prefixes(self) -> tuple[str, ...]:
        """All prefixes that mark an import as project-local."""
        alias_keys = tuple(
            key[:-1] if key.endswith("*") else key
            for key in self.aliases
        )
        return self.alias_prefixes + tuple(k for k in alias_keys if k)
