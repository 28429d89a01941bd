"""Optional AI diff summaries for pull request descriptions."""

from __future__ import annotations

import os

from . import log
from .http import JsonHttpClient, bearer_auth_header
from .models import AIConfig
from .services.errors import CanopyError

OPENAI_BASE_URL = "https://api.openai.com/v1"
SUMMARY_TIMEOUT_SECONDS = 60.0
MAX_DIFF_CHARS = 60000
SYSTEM_PROMPT = "You are a helpful assistant that summarizes git diffs clearly and concisely."
USER_PROMPT_TEMPLATE = "Summarize the following git diff:\n\n{diff}"


def ai_disabled_reason(config: AIConfig) -> str | None:
    """Return why AI summaries are off, or ``None`` when they are on."""
    if config.provider == "none":
        return "ai.provider is 'none'"
    if not config.model:
        return "ai.model is not set"
    if not config.api_key:
        return "no OpenAI API key is configured"
    return None


def ai_enabled(config: AIConfig) -> bool:
    return ai_disabled_reason(config) is None


def summary_prompt(diff_text: str) -> str:
    """Return the user prompt for a diff, truncating oversized diffs.

    Example:
        >>> summary_prompt("+x").splitlines()
        ['Summarize the following git diff:', '', '+x']
    """
    if len(diff_text) > MAX_DIFF_CHARS:
        diff_text = diff_text[:MAX_DIFF_CHARS].rstrip() + "\n...(truncated)"
    return USER_PROMPT_TEMPLATE.format(diff=diff_text)


def completion_text(payload: object) -> str | None:
    """Return the first choice's message content from a chat completion.

    Example:
        >>> completion_text({"choices": [{"message": {"content": " Adds retries. "}}]})
        'Adds retries.'
        >>> completion_text({"choices": []}) is None
        True
    """
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    message = choices[0].get("message")
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        return None
    return content.strip() or None


class OpenAIDiffSummarizer:
    """Summarize diffs with an OpenAI chat completion.

    Returns ``None`` when unconfigured, for empty diffs, and on any request
    failure; failures are logged at debug level.
    """

    def __init__(
        self,
        config: AIConfig,
        *,
        client: JsonHttpClient | None = None,
        base_url: str | None = None,
    ) -> None:
        self.config = config
        resolved = base_url or os.environ.get("OPENAI_BASE_URL") or OPENAI_BASE_URL
        self.base_url = resolved.rstrip("/")
        self.client = client or JsonHttpClient(
            bearer_auth_header(config.api_key), timeout_seconds=SUMMARY_TIMEOUT_SECONDS
        )

    def summarize(self, diff_text: str) -> str | None:
        reason = ai_disabled_reason(self.config)
        if reason is not None:
            log.debug(f"Skipping AI summary: {reason}")
            return None
        if not diff_text.strip():
            return None
        try:
            payload = self.client.post_json(
                f"{self.base_url}/chat/completions",
                {
                    "model": self.config.model,
                    "messages": [
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": summary_prompt(diff_text)},
                    ],
                },
                context="requesting an AI summary",
            )
        except CanopyError as exc:
            log.debug(f"AI summary unavailable: {exc.message}")
            return None
        return completion_text(payload)
