"""Model-backed generation: provider profiles, chat client, generator."""

from vibeguard.llm.client import ChatClient
from vibeguard.llm.errors import (
    LLMAuthError,
    LLMClientError,
    LLMConfigError,
    LLMEmptyResponseError,
    LLMHTTPError,
    LLMRateLimitError,
    LLMRequestError,
    LLMResponseError,
    LLMServerError,
)
from vibeguard.llm.generator import LLMGenerator, generator_for_provider, strip_code_fences
from vibeguard.llm.protocols import LLMClient
from vibeguard.llm.providers import PROVIDERS, ProviderProfile, resolve_provider

__all__ = [
    "ChatClient",
    "LLMAuthError",
    "LLMClient",
    "LLMClientError",
    "LLMConfigError",
    "LLMEmptyResponseError",
    "LLMGenerator",
    "LLMHTTPError",
    "LLMRateLimitError",
    "LLMRequestError",
    "LLMResponseError",
    "LLMServerError",
    "PROVIDERS",
    "ProviderProfile",
    "generator_for_provider",
    "resolve_provider",
    "strip_code_fences",
]
