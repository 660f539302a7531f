"""
Shared pieces of the language model integration.

Every provider implements :class:`AIProvider`. HTTP calls go through
:func:`post_json`, which turns transport failures, non-200 statuses and
undecodable bodies into :class:`LLMError` so providers only deal with
the shape of a successful response.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from textwrap import dedent
from typing import Any, Dict, List, Optional

import requests


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


SYSTEM_PROMPT = "You are a git commit message expert. Write messages in Conventional Commit format."

# Characters of diff included in a prompt.
PROMPT_DIFF_LIMIT = 5000
MAX_TOKENS = 500
TEMPERATURE = 0.3


class LLMError(Exception):
    """Raised when communication with a language model provider fails."""

    pass


def strip_thinking_tags(text: str) -> str:
    """Remove reasoning blocks such as ``<think>...</think>`` from a response.

    >>> strip_thinking_tags("<think>reasoning...</think>Answer")
    'Answer'
    """
    thinking_patterns = [
        r"<think>.*?</think>",
        r"<thinking>.*?</thinking>",
        r"<thought>.*?</thought>",
        r"<reasoning>.*?</reasoning>",
    ]
    result = text
    for pattern in thinking_patterns:
        result = re.sub(pattern, "", result, flags=re.DOTALL | re.IGNORECASE)
    return result.strip()


def build_commit_prompt(diff: str, files: List[str]) -> str:
    """Construct the commit message prompt for ``diff`` touching ``files``."""
    return dedent(
        f"""
        Analyze the following git diff and write a detailed conventional commit message.

        Files: {", ".join(files)}

        Diff:
        ```
        {{diff}}
        ```

        FORMAT (always use this format):
        <type>(<scope>): <short title>

        <paragraph of at least 3-4 sentences explaining the change>

        - <change 1>
        - <change 2>
        - <change 3>

        RULES:
        1. First line: type(scope): short title (max 72 characters)
        2. Leave a blank line
        3. Explain WHAT the changes do and WHY they were made
        4. Leave a blank line
        5. List the important changes as bullet points
        6. Types: feat, fix, docs, style, refactor, test, chore, perf, ci, build

        Output only the commit message.
        """
    ).strip().replace("{diff}", diff[:PROMPT_DIFF_LIMIT])


def post_json(
    url: str,
    payload: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None,
    timeout: float = 60.0,
    provider: str = "LLM",
) -> Dict[str, Any]:
    """POST ``payload`` as JSON and return the decoded response body.

    Raises
    ------
    LLMError
        If the request fails, the status is not 200, or the body is not
        a JSON object.
    """
    logger.debug("Sending request to %s at %s", provider, url)
    try:
        response = requests.post(url, json=payload, headers=headers or {}, timeout=timeout)
    except requests.RequestException as exc:
        logger.error("Failed to connect to %s: %s", provider, exc)
        raise LLMError(f"{provider} request failed: {exc}") from exc
    if response.status_code != 200:
        logger.error("%s returned non-200 status %s: %s", provider, response.status_code, response.text)
        raise LLMError(f"{provider} API error: {response.status_code} - {response.text}")
    try:
        data = response.json()
    except ValueError as exc:
        logger.error("Failed to parse %s response: %s", provider, exc)
        raise LLMError(f"Failed to parse {provider} response") from exc
    if not isinstance(data, dict):
        raise LLMError(f"Unexpected response structure from {provider}")
    return data


class AIProvider(ABC):
    """Capability shared by all language model providers."""

    name: str = "LLM"

    def __init__(self, model: str, request_timeout: float = 60.0) -> None:
        self.model = model
        self.request_timeout = request_timeout

    @abstractmethod
    def generate_commit_message(self, diff: str, files: List[str]) -> str:
        """Return a commit message drafted from ``diff``.

        Raises
        ------
        LLMError
            If the provider cannot be reached or answers unexpectedly.
        """

    @abstractmethod
    def test_connection(self) -> bool:
        """Return True if the provider accepts a minimal request."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model!r})"
