"""
OpenAI-compatible speech endpoint (`POST /audio/speech`)

Also used for Ollama and custom gateways that mirror the OpenAI schema.
"""

from castengine.models import ProviderConfig
from castengine.services.llm.base import HttpRequest, bearer_headers

from .base import SpeechProtocol, TtsOptions

DEFAULT_VOICE = "alloy"


class OpenAISpeech(SpeechProtocol):

    def build_request(self, config: ProviderConfig, text: str, options: TtsOptions) -> HttpRequest:
        body = {
            "model": config.model_name,
            "input": text,
            "voice": options.voice or DEFAULT_VOICE,
            "response_format": "mp3",
        }
        if options.speed is not None:
            body["speed"] = options.speed

        return HttpRequest(
            url=config.endpoint("/audio/speech"),
            json=body,
            headers=bearer_headers(config),
        )
