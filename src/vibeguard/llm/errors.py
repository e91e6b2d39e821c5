"""Errors raised while talking to a model provider.

Everything here derives from LLMClientError, itself a VibeguardError.
HTTP failures are split by what the caller can do about them: fix the
configuration, wait, or give up.
"""

from __future__ import annotations

from vibeguard.exceptions import VibeguardError


class LLMClientError(VibeguardError):
    """Base for all model provider errors."""


class LLMConfigError(LLMClientError):
    """Unknown provider or missing API key."""


class LLMHTTPError(LLMClientError):
    """The provider answered with an error status."""

    def __init__(self, message: str, *, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(message)


class LLMAuthError(LLMHTTPError):
    """The key was rejected (401/403). Never retried."""


class LLMRateLimitError(LLMHTTPError):
    """Rate limited (429).

    Attributes:
        retry_after: Seconds the provider asked us to wait, if it said.
    """

    def __init__(self, message: str, *, retry_after: float | None = None) -> None:
        self.retry_after = retry_after
        if retry_after is not None:
            message = f"{message} (retry after {retry_after}s)"
        super().__init__(message, status_code=429)


class LLMServerError(LLMHTTPError):
    """The provider failed on its side (5xx). Retried."""


class LLMRequestError(LLMHTTPError):
    """The provider refused the request itself (other 4xx). Never retried."""


class LLMResponseError(LLMClientError):
    """A success status with a body that is not a chat completion."""


class LLMEmptyResponseError(LLMResponseError):
    """The model replied, but with no usable source text."""
