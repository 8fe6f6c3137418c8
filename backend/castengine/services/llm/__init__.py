"""
Chat Service - Unified text generation over OpenAI-compatible and Anthropic endpoints

This module provides:
- ChatProtocol strategies (request building and response parsing per wire format)
- StreamDeltaParser for incremental SSE decoding
- ChatClient with retrying `chat` and sink-driven `stream_chat`

Usage:
    from castengine.services.llm import ChatClient

    client = ChatClient(provider_config, retry_policy)
    text = await client.chat([Message.user("Hello")])
"""

from .base import (
    ChatProtocol,
    HttpRequest,
    OPENAI_COMPATIBLE_PROVIDERS,
    bearer_headers,
)
from .anthropic_provider import AnthropicChat
from .openai_provider import OpenAICompatibleChat
from .factory import get_chat_protocol
from .streaming import (
    DeltaFormat,
    StreamDeltaParser,
    collect_deltas,
    iter_deltas,
    parse_anthropic_delta,
    parse_openai_delta,
)
from .client import ChatClient

__all__ = [
    # Base classes
    "ChatProtocol",
    "HttpRequest",
    "OPENAI_COMPATIBLE_PROVIDERS",
    "bearer_headers",
    # Providers
    "AnthropicChat",
    "OpenAICompatibleChat",
    # Factory
    "get_chat_protocol",
    # Streaming
    "DeltaFormat",
    "StreamDeltaParser",
    "collect_deltas",
    "iter_deltas",
    "parse_anthropic_delta",
    "parse_openai_delta",
    # Client
    "ChatClient",
]
