"""
Concrete language model providers.

Each class adapts one HTTP API to :class:`AIProvider`. Groq, DeepSeek and
OpenAI share the OpenAI chat-completions format; MiniMax uses the same
request but answers in several shapes; Anthropic, Gemini and Ollama each
have their own request and response formats.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from plm_helper.llm.base import (
    MAX_TOKENS,
    SYSTEM_PROMPT,
    TEMPERATURE,
    AIProvider,
    LLMError,
    build_commit_prompt,
    post_json,
    strip_thinking_tags,
)


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


class OpenAICompatibleProvider(AIProvider):
    """Provider for chat-completions APIs authenticated with a bearer token."""

    def __init__(
        self,
        name: str,
        api_url: str,
        api_key: str,
        model: str,
        request_timeout: float = 60.0,
    ) -> None:
        super().__init__(model, request_timeout)
        self.name = name
        self.api_url = api_url
        self.api_key = api_key

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def _chat(self, messages: List[Dict[str, str]], max_tokens: int, temperature: Optional[float] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens,
        }
        if temperature is not None:
            payload["temperature"] = temperature
        return post_json(self.api_url, payload, self._headers(), self.request_timeout, self.name)

    def _extract(self, data: Dict[str, Any]) -> str:
        try:
            content = data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError):
            return ""
        return content

    def generate_commit_message(self, diff: str, files: List[str]) -> str:
        data = self._chat(
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_commit_prompt(diff, files)},
            ],
            MAX_TOKENS,
            TEMPERATURE,
        )
        return strip_thinking_tags(self._extract(data))

    def test_connection(self) -> bool:
        try:
            self._chat([{"role": "user", "content": "test"}], 5)
        except LLMError as exc:
            logger.debug("%s connection test failed: %s", self.name, exc)
            return False
        return True


class MiniMaxProvider(OpenAICompatibleProvider):
    """MiniMax reports errors in ``base_resp`` even on HTTP 200."""

    _TEXT_FIELDS = ("reply", "output", "text", "result", "content")

    def _chat(self, messages, max_tokens, temperature=None):
        data = super()._chat(messages, max_tokens, temperature)
        base_resp = data.get("base_resp")
        if isinstance(base_resp, dict) and base_resp.get("status_code", 0) != 0:
            raise LLMError(
                f"MiniMax API error: {base_resp.get('status_msg') or 'unknown error'} "
                f"(code: {base_resp.get('status_code')})"
            )
        return data

    def _extract(self, data: Dict[str, Any]) -> str:
        content = super()._extract(data)
        if content:
            return content
        for key in self._TEXT_FIELDS:
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
        raise LLMError(f"Unrecognised MiniMax response format: {str(data)[:200]}")


class AnthropicProvider(AIProvider):
    name = "Anthropic"
    API_VERSION = "2023-06-01"

    def __init__(self, api_url: str, api_key: str, model: str, request_timeout: float = 60.0) -> None:
        super().__init__(model, request_timeout)
        self.api_url = api_url
        self.api_key = api_key

    def _messages(self, content: str, max_tokens: int) -> Dict[str, Any]:
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": self.API_VERSION,
        }
        payload = {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": content}],
        }
        return post_json(self.api_url, payload, headers, self.request_timeout, self.name)

    def generate_commit_message(self, diff: str, files: List[str]) -> str:
        data = self._messages(build_commit_prompt(diff, files), MAX_TOKENS)
        try:
            text = data["content"][0]["text"] or ""
        except (KeyError, IndexError, TypeError):
            text = ""
        return strip_thinking_tags(text)

    def test_connection(self) -> bool:
        try:
            self._messages("test", 5)
        except LLMError as exc:
            logger.debug("Anthropic connection test failed: %s", exc)
            return False
        return True


class GeminiProvider(AIProvider):
    """Google AI Studio; the API key travels as a query parameter."""

    name = "Gemini"

    def __init__(self, api_url: str, api_key: str, model: str, request_timeout: float = 60.0) -> None:
        super().__init__(model, request_timeout)
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key

    def _endpoint(self) -> str:
        return f"{self.api_url}/{self.model}:generateContent?key={self.api_key}"

    def _generate(self, text: str, max_tokens: int, temperature: Optional[float] = None) -> Dict[str, Any]:
        generation_config: Dict[str, Any] = {"maxOutputTokens": max_tokens}
        if temperature is not None:
            generation_config["temperature"] = temperature
        payload = {
            "contents": [{"parts": [{"text": text}]}],
            "generationConfig": generation_config,
        }
        data = post_json(
            self._endpoint(),
            payload,
            {"Content-Type": "application/json"},
            self.request_timeout,
            self.name,
        )
        error = data.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else error
            raise LLMError(f"Gemini API error: {message}")
        return data

    def generate_commit_message(self, diff: str, files: List[str]) -> str:
        data = self._generate(f"{SYSTEM_PROMPT}\n\n{build_commit_prompt(diff, files)}", MAX_TOKENS, TEMPERATURE)
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            text = None
        if not text:
            raise LLMError("Gemini did not produce a response")
        return strip_thinking_tags(text)

    def test_connection(self) -> bool:
        try:
            self._generate("test", 5)
        except LLMError as exc:
            logger.debug("Gemini connection test failed: %s", exc)
            return False
        return True


class OllamaProvider(AIProvider):
    """Locally running Ollama server; no API key required.

    Parameters
    ----------
    model : str
        Name of the model to use for generation, e.g. ``"llama3"``.
    base_url : str
        Base URL of the Ollama server, e.g. ``"http://localhost"``.
    port : int
        Port number of the Ollama server.
    """

    name = "Ollama"

    def __init__(
        self,
        model: str,
        base_url: str = "http://localhost",
        port: int = 11434,
        request_timeout: float = 60.0,
    ) -> None:
        super().__init__(model, request_timeout)
        self.base_url = base_url.rstrip("/")
        self.port = port

    def _endpoint(self, path: str) -> str:
        return f"{self.base_url}:{self.port}{path}"

    def generate_commit_message(self, diff: str, files: List[str]) -> str:
        payload = {
            "model": self.model,
            "prompt": build_commit_prompt(diff, files),
            "stream": False,
        }
        data = post_json(self._endpoint("/api/generate"), payload, timeout=self.request_timeout, provider=self.name)
        # /api/generate answers with 'response'; /api/chat with 'message'.
        if "response" in data:
            return strip_thinking_tags(data.get("response") or "")
        if isinstance(data.get("message"), dict):
            return strip_thinking_tags(data["message"].get("content") or "")
        raise LLMError("Unexpected response structure from Ollama")

    def test_connection(self) -> bool:
        try:
            response = requests.get(self._endpoint("/api/tags"), timeout=self.request_timeout)
        except requests.RequestException as exc:
            logger.debug("Ollama connection test failed: %s", exc)
            return False
        return response.status_code == 200
