"""Model provider profiles.

Every supported provider exposes an OpenAI-compatible chat-completions
endpoint, so a profile only records where that endpoint lives, which
environment variables hold its key and an optional URL override, and the
model used when the request does not name one.
"""

from __future__ import annotations

from dataclasses import dataclass

from vibeguard.llm.errors import LLMConfigError
from vibeguard.models.catalog import ProviderSelection


@dataclass(frozen=True)
class ProviderProfile:
    """Connection details for one provider."""

    name: str
    base_url: str
    api_key_env: str
    default_model: str

    @property
    def base_url_env(self) -> str:
        """Variable that overrides ``base_url``, e.g. for a proxy."""
        return f"VIBEGUARD_{self.name.upper()}_BASE_URL"


PROVIDERS: dict[str, ProviderProfile] = {
    "openai": ProviderProfile(
        name="openai",
        base_url="https://api.openai.com/v1",
        api_key_env="OPENAI_API_KEY",
        default_model="gpt-4o",
    ),
    "anthropic": ProviderProfile(
        name="anthropic",
        base_url="https://api.anthropic.com/v1",
        api_key_env="ANTHROPIC_API_KEY",
        default_model="claude-3-5-sonnet-20241022",
    ),
    "google": ProviderProfile(
        name="google",
        base_url="https://generativelanguage.googleapis.com/v1beta/openai",
        api_key_env="GOOGLE_GENERATIVE_AI_API_KEY",
        default_model="gemini-2.5-pro-latest",
    ),
}


def resolve_provider(selection: ProviderSelection) -> ProviderProfile:
    try:
        return PROVIDERS[selection.provider]
    except KeyError:
        raise LLMConfigError(f"Unsupported provider: {selection.provider}") from None
