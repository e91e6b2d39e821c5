"""Auto-fix result model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AutoFixResult:
    """Transformed source plus one description per applied fix.

    ``fixes`` is empty when nothing changed; in that case ``code`` is the
    input text unchanged.
    """

    code: str
    fixes: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.fixes)
