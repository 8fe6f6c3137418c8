"""
Chat protocol factory

Selects the wire-format strategy for a provider tag.
"""

from castengine.models import ApiProvider

from .anthropic_provider import AnthropicChat
from .base import OPENAI_COMPATIBLE_PROVIDERS, ChatProtocol
from .openai_provider import OpenAICompatibleChat


def get_chat_protocol(provider: ApiProvider) -> ChatProtocol:
    """Get the chat strategy for a provider

    Args:
        provider: Provider tag of the configuration

    Returns:
        ChatProtocol instance for that provider's wire format
    """
    provider = ApiProvider(provider)
    if provider == ApiProvider.ANTHROPIC:
        return AnthropicChat()
    if provider in OPENAI_COMPATIBLE_PROVIDERS:
        return OpenAICompatibleChat()
    raise ValueError(f"Unknown provider type: {provider}")
