"""Chat-completions transport bound to one provider profile.

A ChatClient sends a system prompt and a user message to the provider's
``/chat/completions`` endpoint and hands back the reply text. Status codes
are mapped onto the LLM error hierarchy; rate limits, server errors and
network failures are retried with tenacity, honouring ``Retry-After``
when the provider sends it.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx
import tenacity

from vibeguard.llm.errors import (
    LLMAuthError,
    LLMConfigError,
    LLMRateLimitError,
    LLMRequestError,
    LLMResponseError,
    LLMServerError,
)
from vibeguard.llm.providers import ProviderProfile, resolve_provider
from vibeguard.models.catalog import ProviderSelection

logger = logging.getLogger(__name__)

MAX_WAIT_SECONDS = 30.0

_TRANSIENT = (LLMRateLimitError, LLMServerError, httpx.TimeoutException, httpx.NetworkError)
_backoff = (
    tenacity.wait_exponential(multiplier=1, min=1, max=MAX_WAIT_SECONDS)
    + tenacity.wait_random(0, 2)
)


def _wait(retry_state: tenacity.RetryCallState) -> float:
    """Wait as long as a 429 asked for, else back off exponentially."""
    outcome = retry_state.outcome
    error = outcome.exception() if outcome is not None else None
    if isinstance(error, LLMRateLimitError) and error.retry_after is not None:
        return min(error.retry_after, MAX_WAIT_SECONDS)
    return _backoff(retry_state)


def _retry_after(response: httpx.Response) -> float | None:
    try:
        return float(response.headers["Retry-After"])
    except (KeyError, ValueError):
        return None


def raise_for_status(response: httpx.Response, provider: str) -> None:
    """Raise the LLM error matching an error status; do nothing on success."""
    status = response.status_code
    if status < 400:
        return
    detail = f"{provider} returned HTTP {status}: {response.text[:500]}"
    if status in (401, 403):
        raise LLMAuthError(detail, status_code=status)
    if status == 429:
        raise LLMRateLimitError(detail, retry_after=_retry_after(response))
    if status >= 500:
        raise LLMServerError(detail, status_code=status)
    raise LLMRequestError(detail, status_code=status)


def reply_text(data: Any) -> str:
    """Assistant text of a chat completion body.

    Content given as a list of parts (as some compatible endpoints do) is
    joined. A null content gives an empty string.

    Raises:
        LLMResponseError: If the body has no first choice with a message.
    """
    try:
        content = data["choices"][0]["message"].get("content")
    except (KeyError, IndexError, TypeError, AttributeError) as exc:
        raise LLMResponseError(f"Not a chat completion ({exc!r}): {str(data)[:500]}") from exc
    if isinstance(content, list):
        content = "".join(
            part.get("text", "") for part in content if isinstance(part, dict)
        )
    return content or ""


class ChatClient:
    """Sync chat-completions client for one provider.

    Implements the LLMClient protocol.

    Usage::

        with ChatClient.for_selection(ProviderSelection(provider="anthropic")) as client:
            text = client.complete("You write React.", "A pricing table")
    """

    def __init__(
        self,
        profile: ProviderProfile,
        *,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float = 120.0,
        max_attempts: int = 3,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Bind a client to ``profile``.

        Args:
            profile: The provider to talk to.
            api_key: API key. Falls back to the profile's key variable.
            model: Model name. Falls back to the profile's default model.
            base_url: Endpoint root. Falls back to the profile's override
                variable, then to the profile's URL.
            timeout: Request timeout in seconds.
            max_attempts: Attempts per request, counting the first one.
            transport: httpx transport, for tests or custom networking.

        Raises:
            LLMConfigError: If no API key is given or set.
        """
        key = api_key or os.environ.get(profile.api_key_env, "")
        if not key:
            raise LLMConfigError(
                f"No API key for provider '{profile.name}'. "
                f"Pass api_key= or set the {profile.api_key_env} environment variable."
            )
        root = base_url or os.environ.get(profile.base_url_env) or profile.base_url
        self._profile = profile
        self._model = model or profile.default_model
        self._url = f"{root.rstrip('/')}/chat/completions"
        self._max_attempts = max_attempts
        self._client = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={"Authorization": f"Bearer {key}"},
        )

    @classmethod
    def for_selection(cls, selection: ProviderSelection, **kwargs: Any) -> ChatClient:
        """Client for the provider and model named by ``selection``.

        Raises:
            LLMConfigError: If the provider is unknown or its key is unset.
        """
        return cls(resolve_provider(selection), model=selection.model, **kwargs)

    @property
    def profile(self) -> ProviderProfile:
        return self._profile

    @property
    def model(self) -> str:
        return self._model

    @property
    def url(self) -> str:
        return self._url

    def complete(
        self,
        system: str,
        user: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Send one system + user exchange and return the reply text.

        Raises:
            LLMAuthError: Key rejected (not retried).
            LLMRequestError: Other 4xx (not retried).
            LLMRateLimitError: Still rate limited after the last attempt.
            LLMServerError: Still failing after the last attempt.
            LLMResponseError: The body is not a chat completion.
        """
        payload: dict[str, Any] = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
        }
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens

        retryer = tenacity.Retrying(
            retry=tenacity.retry_if_exception_type(_TRANSIENT),
            wait=_wait,
            stop=tenacity.stop_after_attempt(self._max_attempts),
            before_sleep=tenacity.before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        text = reply_text(retryer(self._post, payload))
        logger.debug("%s/%s replied with %d characters", self._profile.name, self._model, len(text))
        return text

    def _post(self, payload: dict[str, Any]) -> Any:
        response = self._client.post(self._url, json=payload)
        raise_for_status(response, self._profile.name)
        try:
            return response.json()
        except ValueError as exc:
            raise LLMResponseError(
                f"{self._profile.name} returned a non-JSON body: {response.text[:500]}"
            ) from exc

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> ChatClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
