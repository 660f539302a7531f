"""
Provider catalog and construction.

:class:`ProviderType` enumerates the supported providers. The provider
to use is chosen once, from the configuration, by :func:`create_provider`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from plm_helper.config.loader import PlmConfig
from plm_helper.llm.base import AIProvider
from plm_helper.llm.providers import (
    AnthropicProvider,
    GeminiProvider,
    MiniMaxProvider,
    OllamaProvider,
    OpenAICompatibleProvider,
)


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


class ProviderType(str, Enum):
    NONE = "none"
    GROQ = "groq"
    GEMINI = "gemini"
    DEEPSEEK = "deepseek"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    MINIMAX = "minimax"
    OLLAMA = "ollama"


@dataclass(frozen=True)
class ProviderInfo:
    name: str
    description: str
    default_model: str
    models: Tuple[str, ...]
    api_url: str
    requires_key: bool = True


PROVIDER_INFO: Dict[ProviderType, ProviderInfo] = {
    ProviderType.NONE: ProviderInfo(
        "Disabled", "AI suggestions turned off", "", (), "", requires_key=False,
    ),
    ProviderType.GROQ: ProviderInfo(
        "Groq",
        "Groq - free tier, very fast",
        "llama-3.3-70b-versatile",
        ("llama-3.3-70b-versatile", "llama-3.1-8b-instant", "mixtral-8x7b-32768"),
        "https://api.groq.com/openai/v1/chat/completions",
    ),
    ProviderType.GEMINI: ProviderInfo(
        "Google Gemini",
        "Google AI Studio - free tier available",
        "gemini-2.0-flash",
        ("gemini-2.0-flash", "gemini-2.0-flash-lite", "gemini-pro"),
        "https://generativelanguage.googleapis.com/v1beta/models",
    ),
    ProviderType.DEEPSEEK: ProviderInfo(
        "DeepSeek",
        "DeepSeek AI - affordable and capable",
        "deepseek-chat",
        ("deepseek-chat", "deepseek-coder"),
        "https://api.deepseek.com/v1/chat/completions",
    ),
    ProviderType.OPENAI: ProviderInfo(
        "OpenAI",
        "ChatGPT models (GPT-4, GPT-3.5)",
        "gpt-3.5-turbo",
        ("gpt-4", "gpt-4-turbo", "gpt-3.5-turbo"),
        "https://api.openai.com/v1/chat/completions",
    ),
    ProviderType.ANTHROPIC: ProviderInfo(
        "Anthropic",
        "Claude models",
        "claude-3-haiku-20240307",
        ("claude-3-opus-20240229", "claude-3-sonnet-20240229", "claude-3-haiku-20240307"),
        "https://api.anthropic.com/v1/messages",
    ),
    ProviderType.MINIMAX: ProviderInfo(
        "MiniMax",
        "MiniMax AI - capable and fast",
        "MiniMax-Text-01",
        ("MiniMax-Text-01", "MiniMax-M1", "abab6.5s-chat"),
        "https://api.minimax.chat/v1/text/chatcompletion_v2",
    ),
    ProviderType.OLLAMA: ProviderInfo(
        "Ollama (local)",
        "Locally running models - no API key required",
        "llama2",
        ("llama2", "codellama", "mistral", "deepseek-coder"),
        "http://localhost:11434/api/generate",
        requires_key=False,
    ),
}


def create_provider(config: PlmConfig) -> Optional[AIProvider]:
    """Build the provider selected by ``config``.

    Returns ``None`` when AI is disabled, the provider is ``none``, or the
    provider needs an API key and none is configured.

    Raises
    ------
    ValueError
        If ``config.ai_provider`` is not a known provider tag.
    """
    provider_type = ProviderType(config.ai_provider)
    if not config.ai_enabled or provider_type is ProviderType.NONE:
        return None

    info = PROVIDER_INFO[provider_type]
    model = config.ai_model or info.default_model
    api_key = config.ai_api_key

    if info.requires_key and not api_key:
        logger.warning("AI provider '%s' requires an API key; none configured", provider_type.value)
        return None

    if provider_type in (ProviderType.GROQ, ProviderType.DEEPSEEK, ProviderType.OPENAI):
        return OpenAICompatibleProvider(info.name, info.api_url, api_key, model)
    if provider_type is ProviderType.MINIMAX:
        return MiniMaxProvider(info.name, info.api_url, api_key, model)
    if provider_type is ProviderType.ANTHROPIC:
        return AnthropicProvider(info.api_url, api_key, model)
    if provider_type is ProviderType.GEMINI:
        return GeminiProvider(info.api_url, api_key, model)
    return OllamaProvider(model)


def mask_api_key(key: Optional[str]) -> str:
    """Return ``key`` with all but its first and last four characters hidden."""
    if not key:
        return "(not set)"
    if len(key) <= 8:
        return "****"
    return f"{key[:4]}...{key[-4:]}"
