"""
Speech protocol factory
"""

from castengine.models import ApiProvider

from .base import SpeechProtocol
from .elevenlabs_speech import ElevenLabsSpeech
from .openai_speech import OpenAISpeech


def get_speech_protocol(provider: ApiProvider) -> SpeechProtocol:
    """ElevenLabs has its own schema; every other provider is OpenAI-compatible"""
    if ApiProvider(provider) == ApiProvider.ELEVENLABS:
        return ElevenLabsSpeech()
    return OpenAISpeech()
