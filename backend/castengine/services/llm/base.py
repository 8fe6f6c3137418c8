"""
Base classes for chat providers

Each provider wire format is one strategy implementing the same capability
surface: build the HTTP request, parse a non-streaming response body, and
name the SSE grammar its streaming responses use. `ChatClient` owns the HTTP
round-trip, retries and error classification; strategies stay pure and
independently testable.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Sequence

from castengine.core.exceptions import CastEngineError
from castengine.models import ApiProvider, Message, ProviderConfig
from castengine.services.http_errors import classify_chat_status

from .streaming import DeltaFormat


@dataclass(frozen=True)
class HttpRequest:
    """A fully built provider request"""
    url: str
    json: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)


def bearer_headers(config: ProviderConfig) -> Dict[str, str]:
    """Authorization is sent only when a key is configured (local models have none)"""
    if not config.has_api_key:
        return {}
    return {"Authorization": f"Bearer {config.api_key}"}


class ChatProtocol(ABC):
    """Provider-specific request/response handling for text generation"""

    delta_format: DeltaFormat = DeltaFormat.OPENAI

    @abstractmethod
    def build_request(
        self,
        config: ProviderConfig,
        messages: Sequence[Message],
        stream: bool,
    ) -> HttpRequest:
        """Build the HTTP request for a chat completion"""

    @abstractmethod
    def parse_response(self, data: Any) -> str:
        """Extract the first completion's text from a decoded JSON body

        Raises:
            ModelUnavailableError: If the body has no completion or an unexpected shape
        """

    def classify_status(self, status: int, body: str) -> CastEngineError:
        return classify_chat_status(status, body)

    @property
    def name(self) -> str:
        return type(self).__name__


# Providers that speak the OpenAI chat-completions schema. ElevenLabs has no
# chat API; a misconfigured ElevenLabs text model is sent the same schema.
OPENAI_COMPATIBLE_PROVIDERS = frozenset({
    ApiProvider.OPENAI,
    ApiProvider.OLLAMA,
    ApiProvider.CUSTOM,
    ApiProvider.ELEVENLABS,
})
