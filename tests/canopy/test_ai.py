from __future__ import annotations

import pytest

import canopy.ai as ai
from canopy.models import AIConfig
from canopy.services import TransportError
from tests.canopy.helpers import FakeJsonClient

ENABLED = AIConfig(provider="openai", model="gpt-5", api_key="sk-test")


def _completion(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def test_disabled_reasons() -> None:
    assert ai.ai_disabled_reason(AIConfig()) == "ai.provider is 'none'"
    assert ai.ai_disabled_reason(AIConfig(provider="openai", api_key="")) is not None
    assert ai.ai_disabled_reason(AIConfig(provider="openai", model="", api_key="k")) is not None
    assert ai.ai_enabled(ENABLED)


def test_summarize_returns_none_when_disabled() -> None:
    client = FakeJsonClient(_completion("x"))

    summarizer = ai.OpenAIDiffSummarizer(AIConfig(), client=client)  # type: ignore[arg-type]

    assert summarizer.summarize("diff") is None
    assert client.calls == []


def test_summarize_skips_empty_diff() -> None:
    client = FakeJsonClient(_completion("x"))

    summarizer = ai.OpenAIDiffSummarizer(ENABLED, client=client)  # type: ignore[arg-type]

    assert summarizer.summarize("   ") is None
    assert client.calls == []


def test_summarize_posts_chat_completion(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPENAI_BASE_URL", raising=False)
    client = FakeJsonClient(_completion("  Adds login retries.  "))

    summary = ai.OpenAIDiffSummarizer(ENABLED, client=client).summarize("+retry()")  # type: ignore[arg-type]

    assert summary == "Adds login retries."
    method, url, payload = client.calls[0]
    assert method == "POST"
    assert url == "https://api.openai.com/v1/chat/completions"
    assert isinstance(payload, dict)
    assert payload["model"] == "gpt-5"
    assert payload["messages"] == [
        {"role": "system", "content": ai.SYSTEM_PROMPT},
        {"role": "user", "content": "Summarize the following git diff:\n\n+retry()"},
    ]


def test_base_url_comes_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_BASE_URL", "http://localhost:8080/v1/")

    summarizer = ai.OpenAIDiffSummarizer(ENABLED)

    assert summarizer.base_url == "http://localhost:8080/v1"
    assert summarizer.client.authorization == "Bearer sk-test"


def test_large_diffs_are_truncated() -> None:
    prompt = ai.summary_prompt("x" * 100000)

    assert prompt.endswith("...(truncated)")
    assert len(prompt) < ai.MAX_DIFF_CHARS + 100


def test_request_failures_return_none() -> None:
    client = FakeJsonClient(error=TransportError("Failed while requesting: HTTP 429"))

    summarizer = ai.OpenAIDiffSummarizer(ENABLED, client=client)  # type: ignore[arg-type]

    assert summarizer.summarize("+x") is None


def test_completion_text_handles_malformed_payloads() -> None:
    assert ai.completion_text(None) is None
    assert ai.completion_text({}) is None
    assert ai.completion_text({"choices": ["x"]}) is None
    assert ai.completion_text({"choices": [{"message": {"content": " "}}]}) is None
    assert ai.completion_text({"choices": [{"message": {"content": 3}}]}) is None
