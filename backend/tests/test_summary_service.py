# backend/tests/test_summary_service.py

from types import SimpleNamespace

import httpx
import openai
import pytest

from brains.summaries.client import LLMAPIError, LLMClient, LLMClientError
from brains.summaries.config import LLMConfig
from brains.summaries.schemas import GenerateSummaryRequest, SummarizeTextRequest, SummaryModel
from brains.summaries.service import MAX_INPUT_CHARS, SummaryError, SummaryService


def test_prefers_claude_when_key_available(fake_llm_client):
    client = fake_llm_client()
    result = SummaryService(client).summarize_text(SummarizeTextRequest(text="Some text"))

    assert result.model == SummaryModel.CLAUDE
    assert client.calls[0][0] == "claude"
    assert client.calls[0][2] == 1500


def test_falls_back_to_openai_without_claude_key(fake_llm_client):
    client = fake_llm_client(claude=False)
    result = SummaryService(client).summarize_text(
        SummarizeTextRequest(text="Some text", model="claude", maxLength=300)
    )

    assert result.model == SummaryModel.OPENAI
    assert client.calls[0][2] == 300


def test_openai_requested_explicitly(fake_llm_client):
    client = fake_llm_client()
    result = SummaryService(client).summarize_text(SummarizeTextRequest(text="x", model="openai"))

    assert result.model == SummaryModel.OPENAI


def test_no_keys(fake_llm_client):
    service = SummaryService(fake_llm_client(claude=False, openai=False))

    with pytest.raises(SummaryError, match="No API key available for the selected model"):
        service.summarize_text(SummarizeTextRequest(text="x"))


def test_empty_text(fake_llm_client):
    with pytest.raises(SummaryError, match="No text provided for summarization"):
        SummaryService(fake_llm_client()).summarize_text(SummarizeTextRequest(text="   "))


def test_summary_is_formatted(fake_llm_client):
    client = fake_llm_client(reply="Summary\n- a\n- b\n\n\n\nClosing  words")
    result = SummaryService(client).summarize_text(SummarizeTextRequest(text="x"))

    assert result.summary == "Summary\n• a\n• b\n\nClosing words"


def test_input_is_truncated(fake_llm_client):
    client = fake_llm_client()
    SummaryService(client).summarize_text(SummarizeTextRequest(text="y" * (MAX_INPUT_CHARS + 10)))

    prompt = client.calls[0][1]
    assert prompt.split("\n\n", 1)[1] == "y" * MAX_INPUT_CHARS


def test_structured_summary_uses_openai_settings(fake_llm_client):
    client = fake_llm_client(reply="## Executive Summary\nFine.")
    result = SummaryService(client).generate_structured_summary(
        GenerateSummaryRequest(content="Quarterly numbers")
    )

    _, messages, max_tokens, temperature = client.calls[0]
    assert result.summary == "## Executive Summary\nFine."
    assert messages[1]["content"] == "Please summarize the following note: Quarterly numbers"
    assert max_tokens == 500
    assert temperature == 0.7


def test_structured_summary_wraps_errors(fake_llm_client):
    client = fake_llm_client(error=LLMClientError("OpenAI API error: Too Many Requests"))

    with pytest.raises(SummaryError, match="Error processing text: OpenAI API error: Too Many Requests"):
        SummaryService(client).generate_structured_summary(GenerateSummaryRequest(content="x"))


def test_llm_client_openai_http_error():
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    error = openai.RateLimitError(
        "rate limited",
        response=httpx.Response(status_code=429, request=request),
        body=None,
    )

    def create(**kwargs):
        raise error

    sdk = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    client = LLMClient(LLMConfig(openai_api_key="sk-test", claude_api_key=None), openai_client=sdk)

    with pytest.raises(LLMAPIError, match="OpenAI API error: Too Many Requests"):
        client.openai_chat([{"role": "user", "content": "hi"}], max_tokens=10)


def test_llm_client_openai_success():
    captured = {}

    def create(**kwargs):
        captured.update(kwargs)
        message = SimpleNamespace(content="Done")
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    sdk = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    client = LLMClient(LLMConfig(openai_api_key="sk-test", claude_api_key=None), openai_client=sdk)

    assert client.openai_chat([{"role": "user", "content": "hi"}], max_tokens=10, temperature=0.7) == "Done"
    assert captured["model"] == "gpt-4o-mini"
    assert captured["max_tokens"] == 10
    assert captured["temperature"] == 0.7


def test_llm_client_claude_success(monkeypatch):
    client = LLMClient(LLMConfig(openai_api_key=None, claude_api_key="claude-key"))
    captured = {}

    def fake_post(url, **kwargs):
        captured.update(url=url, headers=kwargs["headers"], json=kwargs["json"])
        return httpx.Response(status_code=200, json={"content": [{"type": "text", "text": "Done"}]})

    monkeypatch.setattr(httpx, "post", fake_post)

    assert client.claude_message("Summarize", max_tokens=100) == "Done"
    assert captured["url"] == "https://api.anthropic.com/v1/messages"
    assert captured["headers"]["x-api-key"] == "claude-key"
    assert captured["json"]["max_tokens"] == 100
