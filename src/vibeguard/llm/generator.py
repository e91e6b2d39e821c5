"""Model-backed Generator.

Implements the pipeline's Generator protocol on top of any LLMClient:
the MDX system prompt goes first, the instruction second, and markdown
code fences the model adds despite being told not to are stripped from
the reply.
"""

from __future__ import annotations

import logging
import re

from vibeguard.llm.client import ChatClient
from vibeguard.llm.errors import LLMEmptyResponseError
from vibeguard.llm.protocols import LLMClient
from vibeguard.models.catalog import ProviderSelection
from vibeguard.prompts.generation import build_system_prompt

logger = logging.getLogger(__name__)

_FENCE_OPEN_RE = re.compile(r"^```[a-zA-Z]*\n", re.MULTILINE)
_FENCE_CLOSE_RE = re.compile(r"\n```[ \t]*$", re.MULTILINE)


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences wrapping (or scattered through) a reply."""
    cleaned = _FENCE_OPEN_RE.sub("", text)
    cleaned = _FENCE_CLOSE_RE.sub("", cleaned)
    return cleaned.strip()


class LLMGenerator:
    """Generate component source with a chat-completion model.

    Usage::

        with LLMGenerator(ChatClient.for_selection(ProviderSelection())) as gen:
            source = gen.generate("A card showing a user's avatar and name")
    """

    def __init__(
        self,
        client: LLMClient,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        allow_typescript: bool = False,
        system_prompt: str | None = None,
    ) -> None:
        self._client = client
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._system_prompt = system_prompt or build_system_prompt(
            allow_typescript=allow_typescript
        )

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    def generate(self, instruction: str) -> str:
        """Ask the model for component source.

        Raises:
            LLMEmptyResponseError: If the reply holds no source text.
            LLMClientError: On transport or API failures.
        """
        reply = self._client.complete(
            self._system_prompt,
            instruction,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        source = strip_code_fences(reply)
        if not source:
            raise LLMEmptyResponseError("Model returned no source text")
        logger.debug("Generated %d characters of source", len(source))
        return source

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> LLMGenerator:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


def generator_for_provider(selection: ProviderSelection) -> LLMGenerator:
    """GeneratorFactory building an LLMGenerator for ``selection``.

    Raises:
        LLMConfigError: If the provider is unknown or its key is unset.
    """
    return LLMGenerator(ChatClient.for_selection(selection))
