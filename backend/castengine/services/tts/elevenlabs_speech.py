"""
ElevenLabs speech endpoint (`POST /v1/text-to-speech/{voice_id}`)
"""

from castengine.models import ProviderConfig
from castengine.services.llm.base import HttpRequest

from .base import SpeechProtocol, TtsOptions

DEFAULT_VOICE_ID = "21m00Tcm4TlvDq8ikWAM"
DEFAULT_STABILITY = 0.5
DEFAULT_SIMILARITY_BOOST = 0.75


class ElevenLabsSpeech(SpeechProtocol):
    """Voice is part of the URL; speed travels inside `voice_settings`"""

    def build_request(self, config: ProviderConfig, text: str, options: TtsOptions) -> HttpRequest:
        voice = options.voice or DEFAULT_VOICE_ID
        body = {
            "text": text,
            "model_id": config.model_name,
        }
        if options.speed is not None:
            body["voice_settings"] = {
                "stability": DEFAULT_STABILITY,
                "similarity_boost": DEFAULT_SIMILARITY_BOOST,
                "speed": options.speed,
            }

        headers = {"content-type": "application/json"}
        if config.has_api_key:
            headers["xi-api-key"] = config.api_key

        return HttpRequest(
            url=config.endpoint(f"/v1/text-to-speech/{voice}"),
            json=body,
            headers=headers,
        )
