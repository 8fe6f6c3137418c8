"""
Anthropic chat provider

The key goes in `x-api-key` next to a pinned `anthropic-version` header and
`max_tokens` is mandatory. System prompts travel in the top-level `system`
field; the reply is a list of content blocks.
"""

from typing import Any, Sequence

from castengine.config import ANTHROPIC_MAX_TOKENS
from castengine.core.exceptions import ModelUnavailableError
from castengine.models import Message, ProviderConfig, Role

from .base import ChatProtocol, HttpRequest
from .streaming import DeltaFormat

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicChat(ChatProtocol):
    """`POST {base_url}/messages`"""

    delta_format = DeltaFormat.ANTHROPIC

    def __init__(self, max_tokens: int = ANTHROPIC_MAX_TOKENS):
        self.max_tokens = max_tokens

    def build_request(
        self,
        config: ProviderConfig,
        messages: Sequence[Message],
        stream: bool,
    ) -> HttpRequest:
        # The Messages API takes system prompts as a top-level field
        system_parts = [m.content for m in messages if m.role == Role.SYSTEM]
        body = {
            "model": config.model_name,
            "max_tokens": self.max_tokens,
            "messages": [m.to_dict() for m in messages if m.role != Role.SYSTEM],
            "stream": stream,
        }
        if system_parts:
            body["system"] = "\n\n".join(system_parts)

        headers = {
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }
        if config.has_api_key:
            headers["x-api-key"] = config.api_key

        return HttpRequest(url=config.endpoint("/messages"), json=body, headers=headers)

    def parse_response(self, data: Any) -> str:
        try:
            blocks = data["content"]
        except (KeyError, TypeError):
            raise ModelUnavailableError("Invalid Anthropic response: missing 'content'") from None

        if not blocks:
            raise ModelUnavailableError("Empty Anthropic response")

        try:
            text = blocks[0]["text"]
        except (KeyError, TypeError, IndexError):
            raise ModelUnavailableError("Invalid Anthropic response: malformed content block") from None

        if not isinstance(text, str):
            raise ModelUnavailableError("Invalid Anthropic response: content block is not text")
        return text
