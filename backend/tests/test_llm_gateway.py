import asyncio
from types import SimpleNamespace

import httpx
import litellm
import openai
import pytest

from subtrans.config import Settings
from subtrans.core.llm import LLMConfigService, ResolvedLLMConfig
from subtrans.core.translation.errors import EndpointError, MissingCredentialsError, RateLimitedError
from subtrans.core.translation.models import Message, PromptBundle
from subtrans.core.translation.pipeline import LiteLLMGateway
from subtrans.core.translation.pipeline import llm_gateway as gateway_module

BUNDLE = PromptBundle(messages=[Message(role="user", content="1. \"안녕\"")], line_count=1)


def make_gateway() -> LiteLLMGateway:
    return LiteLLMGateway(
        api_key="test-key",
        model="gemini-2.0-flash",
        litellm_model="gemini/gemini-2.0-flash",
        provider_name="gemini",
    )


def test_call_returns_content_and_usage(monkeypatch) -> None:
    captured = {}

    async def fake_acompletion(**kwargs):
        captured.update(kwargs)
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content='1. "Привіт"'))],
            usage=SimpleNamespace(prompt_tokens=12, completion_tokens=4, total_tokens=16),
        )

    monkeypatch.setattr(gateway_module, "acompletion", fake_acompletion)

    response = asyncio.run(make_gateway().call(BUNDLE))

    assert response.content == '1. "Привіт"'
    assert response.usage.total_tokens == 16
    assert captured["model"] == "gemini/gemini-2.0-flash"
    assert captured["messages"] == [{"role": "user", "content": '1. "안녕"'}]
    assert captured["temperature"] == 0.1
    assert captured["max_tokens"] == 4096
    assert captured["num_retries"] == 0


def test_rate_limit_is_translated(monkeypatch) -> None:
    async def fake_acompletion(**kwargs):
        raise litellm.RateLimitError(
            message="quota exceeded", llm_provider="gemini", model="gemini-2.0-flash"
        )

    monkeypatch.setattr(gateway_module, "acompletion", fake_acompletion)

    with pytest.raises(RateLimitedError):
        asyncio.run(make_gateway().call(BUNDLE))


def test_other_api_errors_become_endpoint_errors(monkeypatch) -> None:
    async def fake_acompletion(**kwargs):
        request = httpx.Request("POST", "https://generativelanguage.googleapis.com")
        raise openai.APIError("internal error", request=request, body=None)

    monkeypatch.setattr(gateway_module, "acompletion", fake_acompletion)

    with pytest.raises(EndpointError):
        asyncio.run(make_gateway().call(BUNDLE))


def test_litellm_model_prefix() -> None:
    config = ResolvedLLMConfig(provider="gemini", model="gemini-2.0-flash", api_key="k")

    assert config.get_litellm_model() == "gemini/gemini-2.0-flash"
    assert ResolvedLLMConfig(provider="openai", model="gpt-4o-mini", api_key="k").get_litellm_model() == "gpt-4o-mini"


def test_api_key_resolution_order(monkeypatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "from-env")
    settings = Settings(gemini_api_key=None)

    assert LLMConfigService.resolve_config(api_key="from-request", settings=settings).api_key == "from-request"
    assert LLMConfigService.resolve_config(settings=Settings(gemini_api_key="from-settings")).api_key == "from-settings"
    assert LLMConfigService.resolve_config(settings=settings).api_key == "from-env"


def test_missing_api_key_raises(monkeypatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    with pytest.raises(MissingCredentialsError):
        LLMConfigService.resolve_config(settings=Settings(gemini_api_key=None))
