"""
Base classes for speech providers
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from castengine.core.exceptions import CastEngineError
from castengine.models import ProviderConfig
from castengine.services.http_errors import classify_speech_status, classify_speech_transport
from castengine.services.llm.base import HttpRequest


@dataclass(frozen=True)
class TtsOptions:
    """Per-request synthesis options; unset fields use the provider default"""
    voice: Optional[str] = None
    speed: Optional[float] = None


class SpeechProtocol(ABC):
    """Provider-specific request building for text-to-speech"""

    @abstractmethod
    def build_request(self, config: ProviderConfig, text: str, options: TtsOptions) -> HttpRequest:
        """Build the HTTP request that returns encoded audio bytes"""

    def classify_status(self, status: int, body: str) -> CastEngineError:
        return classify_speech_status(status, body)

    def classify_transport(self, exc) -> CastEngineError:
        return classify_speech_transport(exc)

    @property
    def name(self) -> str:
        return type(self).__name__
