"""
OpenAI-compatible chat provider

Used for OpenAI itself and for every server exposing `/chat/completions`
(Ollama's OpenAI endpoint, vLLM, LM Studio, other custom gateways).
"""

from typing import Any, Sequence

from castengine.core.exceptions import ModelUnavailableError
from castengine.models import Message, ProviderConfig

from .base import ChatProtocol, HttpRequest, bearer_headers
from .streaming import DeltaFormat


class OpenAICompatibleChat(ChatProtocol):
    """`POST {base_url}/chat/completions`"""

    delta_format = DeltaFormat.OPENAI

    def build_request(
        self,
        config: ProviderConfig,
        messages: Sequence[Message],
        stream: bool,
    ) -> HttpRequest:
        return HttpRequest(
            url=config.endpoint("/chat/completions"),
            json={
                "model": config.model_name,
                "messages": [m.to_dict() for m in messages],
                "stream": stream,
            },
            headers=bearer_headers(config),
        )

    def parse_response(self, data: Any) -> str:
        try:
            choices = data["choices"]
        except (KeyError, TypeError):
            raise ModelUnavailableError("Invalid response: missing 'choices'") from None

        if not choices:
            raise ModelUnavailableError("Empty response from model")

        try:
            content = choices[0]["message"]["content"]
        except (KeyError, TypeError, IndexError):
            raise ModelUnavailableError("Invalid response: malformed choice") from None

        if not isinstance(content, str):
            raise ModelUnavailableError("Invalid response: choice content is not text")
        return content
