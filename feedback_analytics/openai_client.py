"""Lightweight OpenAI client helper.

Used only by the ingestion path, which scores submissions before they are
stored. The analytics engine never talks to OpenAI.

    from feedback_analytics.openai_client import chat_completion
"""
from __future__ import annotations

import importlib
import os
import types
from typing import Any, Dict, List


class OpenAIClientError(RuntimeError):
    """Raised when client configuration is invalid (e.g., missing API key)."""


_DEFAULT_MODEL = os.getenv("SENTIMENT_MODEL", "gpt-4.1-mini")


def _load_openai() -> types.ModuleType:
    """Import ``openai`` lazily so tests can inject a stub into ``sys.modules``."""
    return importlib.import_module("openai")


def _ensure_api_key_present() -> str:
    """Return the ``OPENAI_API_KEY`` env var or raise.

    Raises
    ------
    OpenAIClientError
        If the env var is missing or empty.
    """

    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise OpenAIClientError("OPENAI_API_KEY environment variable is not set.")
    return api_key


def get_openai_client() -> Any:
    """Return a configured ``openai.OpenAI`` client instance."""
    openai = _load_openai()
    kwargs: Dict[str, Any] = {"api_key": _ensure_api_key_present()}
    org = os.getenv("OPENAI_ORG")
    if org:
        kwargs["organization"] = org
    return openai.OpenAI(**kwargs)


def chat_completion(
    messages: List[Dict[str, str]],
    *,
    model: str = _DEFAULT_MODEL,
    **kwargs: Any,
) -> str:
    """Send *messages* and return the text content of the first choice.

    Raises
    ------
    ValueError
        If the response does not carry a message content.
    """

    client = get_openai_client()
    response = client.chat.completions.create(model=model, messages=messages, **kwargs)
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, TypeError) as exc:
        raise ValueError("Model response missing expected fields") from exc
    if content is None:
        raise ValueError("Model response had empty content")
    return content
