"""Core module with shared LLM plumbing."""

from .parsing import extract_item_list, extract_json_payload, parse_verdict
from .llm import (
    LLMProvider,
    LLMResponse,
    ChatCompletionsProvider,
    OpenAIProvider,
    OpenRouterProvider,
    MockProvider,
    create_provider,
)

__all__ = [
    # Parsing
    "extract_item_list",
    "extract_json_payload",
    "parse_verdict",
    # LLM providers
    "LLMProvider",
    "LLMResponse",
    "ChatCompletionsProvider",
    "OpenAIProvider",
    "OpenRouterProvider",
    "MockProvider",
    "create_provider",
]
