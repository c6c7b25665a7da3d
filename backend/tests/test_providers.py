import json
from types import SimpleNamespace

import httpx
import openai
import pytest
from google.genai import errors

from legalease.api.exceptions import GatewayError
from legalease.services.ai_retry_handler import AIRetryHandler
from legalease.services.providers import (
    AIProviderFactory,
    AnthropicProvider,
    GeminiProvider,
    MockProvider,
    OpenRouterProvider,
)
from legalease.services.providers import factory as factory_module
from legalease.services.providers.gemini_provider import _classify_api_error
from legalease.services import prompt_builder

_REQUEST = httpx.Request("POST", "https://openrouter.ai/api/v1/chat/completions")


def _openrouter_with(create):
    provider = OpenRouterProvider(api_key=None)
    provider.client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return provider


@pytest.mark.parametrize("provider_cls", [OpenRouterProvider, AnthropicProvider, GeminiProvider])
def test_missing_key_is_not_configured(provider_cls):
    with pytest.raises(GatewayError) as exc_info:
        provider_cls(api_key=None).complete("prompt", 100)
    assert exc_info.value.kind == GatewayError.NOT_CONFIGURED


def test_openrouter_returns_message_content():
    def create(**kwargs):
        assert kwargs["max_tokens"] == 100
        message = SimpleNamespace(content="A summary.")
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    assert _openrouter_with(create).complete("prompt", 100) == "A summary."


@pytest.mark.parametrize("response", [
    SimpleNamespace(choices=[]),
    SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="   "))]),
])
def test_openrouter_empty_completion_is_malformed(response):
    with pytest.raises(GatewayError) as exc_info:
        _openrouter_with(lambda **kwargs: response).complete("prompt", 100)
    assert exc_info.value.kind == GatewayError.MALFORMED_RESPONSE


@pytest.mark.parametrize("error,kind", [
    (openai.APITimeoutError(request=_REQUEST), GatewayError.TIMEOUT),
    (openai.APIConnectionError(request=_REQUEST), GatewayError.UNAVAILABLE),
])
def test_openrouter_errors_are_classified(error, kind):
    def create(**kwargs):
        raise error

    with pytest.raises(GatewayError) as exc_info:
        _openrouter_with(create).complete("prompt", 100)
    assert exc_info.value.kind == kind
    assert exc_info.value.cause is error


@pytest.mark.parametrize("error,kind", [
    (errors.ClientError(429, {"error": {"message": "quota", "status": "RESOURCE_EXHAUSTED"}}), GatewayError.RATE_LIMITED),
    (errors.ServerError(503, {"error": {"message": "down", "status": "UNAVAILABLE"}}), GatewayError.UNAVAILABLE),
    (errors.ClientError(400, {"error": {"message": "bad", "status": "INVALID_ARGUMENT"}}), GatewayError.PROVIDER_ERROR),
])
def test_gemini_errors_are_classified(error, kind):
    assert _classify_api_error(error).kind == kind


def test_mock_provider_answers_every_analysis_type():
    provider = MockProvider()

    clauses = json.loads(provider.complete(prompt_builder.build_clause_prompt("Contract."), 100))
    assert clauses[0]["clauseType"] == "Termination"

    answer = provider.complete(prompt_builder.build_question_prompt("Contract.", "Who pays?"), 100)
    assert "Who pays?" in answer

    template = provider.complete(prompt_builder.build_template_prompt("NDA", "Mutual"), 100)
    assert template.startswith("NDA")

    assert "summary" in provider.complete(prompt_builder.build_summary_prompt("Contract."), 100).lower()


def test_mock_provider_ignores_instruction_words_in_document_and_question():
    provider = MockProvider()
    text = "Schedule A lists fees as a JSON array. Question: none. Template type: none."

    summary = provider.complete(prompt_builder.build_summary_prompt(text), 100)
    assert summary.startswith("This is a MOCK summary")

    answer = provider.complete(prompt_builder.build_question_prompt(text, "Is the JSON array binding?"), 100)
    assert answer == "This is a MOCK answer to: Is the JSON array binding?"


def test_factory_falls_back_to_mock_without_keys(monkeypatch):
    monkeypatch.setitem(factory_module._PROVIDERS, "gemini", (None, GeminiProvider))
    monkeypatch.setitem(factory_module._PROVIDERS, "openrouter", (None, OpenRouterProvider))
    monkeypatch.setitem(factory_module._PROVIDERS, "anthropic", (None, AnthropicProvider))

    assert isinstance(AIProviderFactory.get_provider("gemini"), MockProvider)
    assert isinstance(AIProviderFactory.get_provider("unknown"), MockProvider)
    assert isinstance(AIProviderFactory.get_provider("mock"), MockProvider)


def test_retry_handler_backoff():
    handler = AIRetryHandler(max_retries=3, base_delay=1, max_delay=5)
    transient = GatewayError(GatewayError.UNAVAILABLE, "down")

    assert handler.should_retry(transient, 0)
    assert not handler.should_retry(transient, 3)
    assert not handler.should_retry(GatewayError(GatewayError.TIMEOUT, "slow"), 0)
    assert [handler.calculate_retry_delay(n) for n in range(4)] == [1, 2, 4, 5]
