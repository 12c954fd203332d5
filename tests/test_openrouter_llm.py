"""Tests for the OpenRouter client wrapper and LLM factory."""

from __future__ import annotations

from types import SimpleNamespace

import httpx
import openai
import pytest

from config import LLMSettings
from intelligence.llm import Message, OpenRouterLLM, get_llm, looks_like_html
from utils.exceptions import ConfigurationError, GenerationTransportError, UpstreamGatewayError


REQUEST = httpx.Request("POST", "https://openrouter.ai/api/v1/chat/completions")
HTML_PAGE = "<!DOCTYPE html><html><body>Sign in</body></html>"


class _FakeCompletions:
    def __init__(self, outcome):
        self.outcome = outcome
        self.params = None

    async def create(self, **params):
        self.params = params
        if isinstance(self.outcome, BaseException):
            raise self.outcome
        return self.outcome


def _llm_with(outcome) -> tuple:
    llm = OpenRouterLLM(api_key="test-key", app_url="https://candidate.app", app_title="Candidate")
    completions = _FakeCompletions(outcome)
    llm._async_client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return llm, completions


def _completion(content: str):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content), finish_reason="stop")],
        usage=SimpleNamespace(prompt_tokens=10, completion_tokens=5, total_tokens=15),
        model="google/gemini-2.5-flash-lite",
    )


def test_looks_like_html() -> None:
    assert looks_like_html(HTML_PAGE)
    assert looks_like_html("  <html lang='en'>")
    assert not looks_like_html('{"html": "<b>no</b>"}')
    assert not looks_like_html(None)


def test_attribution_headers() -> None:
    llm = OpenRouterLLM(api_key="k", app_url="https://candidate.app", app_title="Candidate")

    assert llm.default_headers == {"HTTP-Referer": "https://candidate.app", "X-Title": "Candidate"}
    assert llm.base_url == "https://openrouter.ai/api/v1"


@pytest.mark.asyncio
async def test_successful_completion_passes_response_format() -> None:
    llm, completions = _llm_with(_completion('{"ok": true}'))

    response = await llm.acomplete(
        [Message.system("sys"), Message.user("hi")],
        response_format={"type": "json_object"},
    )

    assert response.content == '{"ok": true}'
    assert response.usage["total_tokens"] == 15
    assert completions.params["response_format"] == {"type": "json_object"}
    assert completions.params["messages"][0] == {"role": "system", "content": "sys"}


@pytest.mark.asyncio
async def test_html_content_raises_gateway_error() -> None:
    llm, _ = _llm_with(_completion(HTML_PAGE))

    with pytest.raises(UpstreamGatewayError):
        await llm.acomplete([Message.user("hi")])


@pytest.mark.asyncio
async def test_raw_html_body_raises_gateway_error() -> None:
    llm, _ = _llm_with(HTML_PAGE)

    with pytest.raises(UpstreamGatewayError):
        await llm.acomplete([Message.user("hi")])


@pytest.mark.asyncio
async def test_status_error_with_html_body_raises_gateway_error() -> None:
    error = openai.APIStatusError(
        "Unauthorized",
        response=httpx.Response(401, text=HTML_PAGE, request=REQUEST),
        body=None,
    )
    llm, _ = _llm_with(error)

    with pytest.raises(UpstreamGatewayError):
        await llm.acomplete([Message.user("hi")])


@pytest.mark.asyncio
async def test_status_error_with_json_body_is_transport_error() -> None:
    error = openai.APIStatusError(
        "Rate limited",
        response=httpx.Response(429, json={"error": "slow down"}, request=REQUEST),
        body={"error": "slow down"},
    )
    llm, _ = _llm_with(error)

    with pytest.raises(GenerationTransportError) as excinfo:
        await llm.acomplete([Message.user("hi")])

    assert excinfo.value.status_code == 429


@pytest.mark.asyncio
async def test_connection_error_is_transport_error() -> None:
    llm, _ = _llm_with(openai.APIConnectionError(request=REQUEST))

    with pytest.raises(GenerationTransportError):
        await llm.acomplete([Message.user("hi")])


@pytest.mark.asyncio
async def test_no_choices_is_transport_error() -> None:
    llm, _ = _llm_with(SimpleNamespace(choices=[], usage=None, model=None))

    with pytest.raises(GenerationTransportError, match="no choices"):
        await llm.acomplete([Message.user("hi")])


def test_factory_requires_api_key() -> None:
    with pytest.raises(ConfigurationError, match="API_KEY"):
        get_llm(LLMSettings(api_key=None))


def test_factory_rejects_unknown_provider() -> None:
    with pytest.raises(ConfigurationError, match="Unsupported"):
        get_llm(LLMSettings(provider="other", api_key="k"))


def test_factory_builds_openrouter_client() -> None:
    llm = get_llm(LLMSettings(api_key="k", model_name="some/model", temperature=0.1))

    assert isinstance(llm, OpenRouterLLM)
    assert llm.model == "some/model"
    assert llm.temperature == 0.1
    assert llm.api_key == "k"
