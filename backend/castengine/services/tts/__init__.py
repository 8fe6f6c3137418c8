"""
Speech Service - Language-routed text-to-speech

Usage:
    from castengine.services.tts import SpeechClient, TtsOptions

    client = SpeechClient(speech_configs, retry_policy)
    audio = await client.synthesize("Bonjour", "fr", TtsOptions(speed=0.75))
"""

from .base import SpeechProtocol, TtsOptions
from .openai_speech import OpenAISpeech
from .elevenlabs_speech import ElevenLabsSpeech
from .factory import get_speech_protocol
from .client import SpeechClient

__all__ = [
    "SpeechProtocol",
    "TtsOptions",
    "OpenAISpeech",
    "ElevenLabsSpeech",
    "get_speech_protocol",
    "SpeechClient",
]
