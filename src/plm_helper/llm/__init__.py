"""
Language model integration for plm_helper.

Providers implement :class:`AIProvider` and are built from the
configuration by :func:`create_provider`. :func:`generate_ai_suggestion`
drafts a commit message for the staged changes.
"""

from .ai_suggestion import AISuggestionResult, generate_ai_suggestion  # noqa: F401
from .base import AIProvider, LLMError  # noqa: F401
from .factory import PROVIDER_INFO, ProviderType, create_provider, mask_api_key  # noqa: F401
