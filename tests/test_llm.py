"""Tests for the vibeguard.llm package.

Tests cover:
- ChatClient: request shape, provider binding, retry and Retry-After, status mapping
- reply_text: content extraction from chat completion bodies
- LLMGenerator: prompt layout, fence stripping, empty replies
- Providers: profile resolution and the generator factory
- Error hierarchy
"""

from __future__ import annotations

import json
import time

import httpx
import pytest

from vibeguard.exceptions import VibeguardError
from vibeguard.llm import (
    PROVIDERS,
    ChatClient,
    LLMAuthError,
    LLMClient,
    LLMClientError,
    LLMConfigError,
    LLMEmptyResponseError,
    LLMGenerator,
    LLMHTTPError,
    LLMRateLimitError,
    LLMRequestError,
    LLMResponseError,
    LLMServerError,
    generator_for_provider,
    resolve_provider,
    strip_code_fences,
)
from vibeguard.llm.client import reply_text
from vibeguard.models.catalog import ProviderSelection
from vibeguard.protocols import Generator

# ---------------------------------------------------------------------------
# Fixtures and helpers
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _no_backoff(monkeypatch):
    """Skip tenacity's backoff sleeps."""
    monkeypatch.setattr(time, "sleep", lambda seconds: None)


def _completion(content=None) -> dict:
    return {
        "id": "chatcmpl-test123",
        "object": "chat.completion",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


def _client(handler, provider: str = "openai", **kwargs) -> ChatClient:
    kwargs.setdefault("api_key", "test-key")
    kwargs.setdefault("base_url", "http://test-api")
    return ChatClient(PROVIDERS[provider], transport=httpx.MockTransport(handler), **kwargs)


def _counting(*responses: httpx.Response):
    """Handler replaying ``responses`` in order (the last one repeats)."""
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        template = responses[min(len(calls), len(responses)) - 1]
        return httpx.Response(
            template.status_code, headers=template.headers, content=template.content
        )

    return handler, calls


class RecordingClient:
    """LLMClient stub returning one canned reply."""

    def __init__(self, reply: str = "export const A = () => <p/>;"):
        self.reply = reply
        self.calls: list[dict] = []
        self.closed = False

    def complete(self, system, user, *, temperature=None, max_tokens=None):
        self.calls.append({
            "system": system,
            "user": user,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        return self.reply

    def close(self) -> None:
        self.closed = True


# ---------------------------------------------------------------------------
# ChatClient
# ---------------------------------------------------------------------------


class TestChatClient:
    def test_request_shape(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["auth"] = request.headers["Authorization"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=_completion("Hello!"))

        text = _client(handler).complete("Be brief", "Hi", temperature=0.2, max_tokens=100)
        assert text == "Hello!"
        assert captured["url"] == "http://test-api/chat/completions"
        assert captured["auth"] == "Bearer test-key"
        assert captured["body"] == {
            "model": "gpt-4o",
            "messages": [
                {"role": "system", "content": "Be brief"},
                {"role": "user", "content": "Hi"},
            ],
            "temperature": 0.2,
            "max_tokens": 100,
        }

    def test_optional_params_omitted(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=_completion("x"))

        _client(handler, model="gpt-4o-mini").complete("s", "u")
        assert set(captured["body"]) == {"model", "messages"}
        assert captured["body"]["model"] == "gpt-4o-mini"

    def test_profile_supplies_url_and_model(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "ak")
        monkeypatch.delenv("VIBEGUARD_ANTHROPIC_BASE_URL", raising=False)
        with ChatClient(PROVIDERS["anthropic"]) as client:
            assert client.url == "https://api.anthropic.com/v1/chat/completions"
            assert client.model == "claude-3-5-sonnet-20241022"

    def test_base_url_override_from_env(self, monkeypatch):
        monkeypatch.setenv("VIBEGUARD_GOOGLE_BASE_URL", "http://proxy/")
        with ChatClient(PROVIDERS["google"], api_key="gk") as client:
            assert client.url == "http://proxy/chat/completions"

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(LLMConfigError, match="OPENAI_API_KEY"):
            ChatClient(PROVIDERS["openai"])

    def test_retries_server_errors(self):
        handler, calls = _counting(
            httpx.Response(503, text="unavailable"),
            httpx.Response(502, text="bad gateway"),
            httpx.Response(200, json=_completion("Hello!")),
        )
        assert _client(handler).complete("s", "u") == "Hello!"
        assert len(calls) == 3

    def test_server_error_after_last_attempt(self):
        handler, calls = _counting(httpx.Response(500, text="down"))
        with pytest.raises(LLMServerError) as exc_info:
            _client(handler, max_attempts=2).complete("s", "u")
        assert len(calls) == 2
        assert exc_info.value.status_code == 500

    def test_rate_limit_waits_as_asked(self, monkeypatch):
        slept: list[float] = []
        monkeypatch.setattr(time, "sleep", slept.append)
        handler, calls = _counting(
            httpx.Response(429, headers={"Retry-After": "7"}, text="slow down"),
            httpx.Response(200, json=_completion("ok")),
        )
        assert _client(handler).complete("s", "u") == "ok"
        assert slept == [7.0]

    def test_rate_limit_exhausts_attempts(self):
        handler, calls = _counting(
            httpx.Response(429, headers={"Retry-After": "2"}, text="slow down")
        )
        with pytest.raises(LLMRateLimitError) as exc_info:
            _client(handler, max_attempts=2).complete("s", "u")
        assert len(calls) == 2
        assert exc_info.value.retry_after == 2.0

    @pytest.mark.parametrize(
        ("status", "error_cls"),
        [(401, LLMAuthError), (403, LLMAuthError), (400, LLMRequestError), (404, LLMRequestError)],
    )
    def test_client_errors_not_retried(self, status, error_cls):
        handler, calls = _counting(httpx.Response(status, text="nope"))
        with pytest.raises(error_cls) as exc_info:
            _client(handler).complete("s", "u")
        assert len(calls) == 1
        assert exc_info.value.status_code == status
        assert str(exc_info.value).startswith(f"openai returned HTTP {status}")

    def test_network_errors_retried(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json=_completion("back"))

        assert _client(handler).complete("s", "u") == "back"
        assert len(calls) == 2

    def test_non_json_body(self):
        handler, _ = _counting(httpx.Response(200, text="<html>"))
        with pytest.raises(LLMResponseError, match="non-JSON"):
            _client(handler).complete("s", "u")

    def test_satisfies_protocol(self):
        with _client(lambda request: httpx.Response(200)) as client:
            assert isinstance(client, LLMClient)


class TestReplyText:
    def test_plain_content(self):
        assert reply_text(_completion("Hello!")) == "Hello!"

    def test_null_content(self):
        assert reply_text(_completion(None)) == ""

    def test_content_parts_joined(self):
        parts = [{"type": "text", "text": "export "}, {"type": "text", "text": "const A = 1;"}]
        assert reply_text(_completion(parts)) == "export const A = 1;"

    @pytest.mark.parametrize("body", [{"error": "?"}, {"choices": []}, {"choices": [{}]}, []])
    def test_malformed(self, body):
        with pytest.raises(LLMResponseError):
            reply_text(body)


# ---------------------------------------------------------------------------
# LLMGenerator
# ---------------------------------------------------------------------------


class TestLLMGenerator:
    def test_prompt_layout(self):
        client = RecordingClient()
        generator = LLMGenerator(client, temperature=0.3)
        assert generator.generate("A card") == "export const A = () => <p/>;"
        assert client.calls == [{
            "system": generator.system_prompt,
            "user": "A card",
            "temperature": 0.3,
            "max_tokens": None,
        }]

    def test_typescript_prompt(self):
        generator = LLMGenerator(RecordingClient(), allow_typescript=True)
        assert "TypeScript interfaces are allowed" in generator.system_prompt

    def test_custom_system_prompt(self):
        assert LLMGenerator(RecordingClient(), system_prompt="Be terse").system_prompt == "Be terse"

    def test_fences_stripped(self):
        reply = "```mdx\nimport React from 'react';\n\nexport const A = () => <p/>;\n```"
        generator = LLMGenerator(RecordingClient(reply))
        assert generator.generate("x") == "import React from 'react';\n\nexport const A = () => <p/>;"

    @pytest.mark.parametrize("reply", ["", "  \n", "```tsx\n\n```"])
    def test_empty_reply(self, reply):
        generator = LLMGenerator(RecordingClient(reply))
        with pytest.raises(LLMEmptyResponseError):
            generator.generate("x")

    def test_context_manager_closes_client(self):
        client = RecordingClient()
        with LLMGenerator(client) as generator:
            assert isinstance(generator, Generator)
        assert client.closed

    def test_end_to_end_over_http(self):
        reply = "```tsx\nexport const A = () => <p/>;\n```"
        handler, calls = _counting(httpx.Response(200, json=_completion(reply)))
        generator = LLMGenerator(_client(handler))
        assert generator.generate("A paragraph") == "export const A = () => <p/>;"
        messages = json.loads(calls[0].content)["messages"]
        assert messages[0]["content"] == generator.system_prompt
        assert messages[1] == {"role": "user", "content": "A paragraph"}


class TestStripCodeFences:
    def test_plain_text_untouched(self):
        assert strip_code_fences("export const A = 1;\n") == "export const A = 1;"

    def test_language_tag(self):
        assert strip_code_fences("```tsx\nconst a = 1;\n```\n") == "const a = 1;"


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------


class TestProviders:
    def test_known_providers(self):
        assert set(PROVIDERS) == {"openai", "anthropic", "google"}

    def test_resolve(self):
        profile = resolve_provider(ProviderSelection(provider="google"))
        assert profile.api_key_env == "GOOGLE_GENERATIVE_AI_API_KEY"
        assert profile.base_url_env == "VIBEGUARD_GOOGLE_BASE_URL"

    def test_selected_model_wins(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "ok")
        with ChatClient.for_selection(ProviderSelection(model="gpt-4o-mini")) as client:
            assert client.model == "gpt-4o-mini"
            assert client.profile is PROVIDERS["openai"]

    def test_missing_provider_key(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_GENERATIVE_AI_API_KEY", raising=False)
        with pytest.raises(LLMConfigError, match="GOOGLE_GENERATIVE_AI_API_KEY"):
            ChatClient.for_selection(ProviderSelection(provider="google"))

    def test_generator_factory(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "ok")
        generator = generator_for_provider(ProviderSelection())
        assert isinstance(generator, LLMGenerator)
        generator.close()


class TestErrorHierarchy:
    @pytest.mark.parametrize(
        "error_cls",
        [
            LLMConfigError,
            LLMAuthError,
            LLMRateLimitError,
            LLMServerError,
            LLMRequestError,
            LLMResponseError,
            LLMEmptyResponseError,
        ],
    )
    def test_inherits_base(self, error_cls):
        assert issubclass(error_cls, LLMClientError)
        assert issubclass(error_cls, VibeguardError)

    def test_http_errors_carry_status(self):
        for error_cls in (LLMAuthError, LLMRateLimitError, LLMServerError, LLMRequestError):
            assert issubclass(error_cls, LLMHTTPError)
        assert LLMRateLimitError("slow").status_code == 429

    def test_rate_limit_message(self):
        assert str(LLMRateLimitError("Rate limited", retry_after=3.0)) == (
            "Rate limited (retry after 3.0s)"
        )
