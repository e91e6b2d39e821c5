"""LLM client protocol."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class LLMClient(Protocol):
    """What LLMGenerator needs from a model client.

    The built-in ChatClient implements this protocol; any object with
    matching ``complete()`` and ``close()`` methods works.
    """

    def complete(
        self,
        system: str,
        user: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Send a system prompt and one user message, return the reply text."""
        ...

    def close(self) -> None:
        """Release underlying resources."""
        ...
