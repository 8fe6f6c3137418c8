"""
Speech client

Routes each synthesis request to the speech endpoint configured for the
requested language and returns the encoded audio bytes.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional, Sequence

import httpx

from castengine.config import SPEECH_TIMEOUT
from castengine.core import get_logger
from castengine.core.exceptions import SynthesisFailedError
from castengine.models import ProviderConfig
from castengine.services.retry import RetryPolicy

from .base import TtsOptions
from .factory import get_speech_protocol

logger = get_logger(__name__, component="speech_client")


class SpeechClient:
    """Language-routed text-to-speech over one or more configured endpoints

    Routing for a language tag:
        1. a config whose language equals the tag
        2. a config whose language is a prefix of the tag or vice versa
           ("en" serves "en-US" and "en-US" serves "en")
        3. the first config
    """

    def __init__(
        self,
        configs: Sequence[ProviderConfig],
        retry_policy: Optional[RetryPolicy] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = SPEECH_TIMEOUT,
    ):
        self.configs: List[ProviderConfig] = list(configs)
        self.retry_policy = retry_policy or RetryPolicy()
        self.timeout = timeout
        self._http_client = http_client

    def find_config(self, language: str) -> ProviderConfig:
        """
        Raises:
            SynthesisFailedError: If no speech endpoint is configured at all
        """
        for config in self.configs:
            if config.language == language:
                return config

        for config in self.configs:
            served = config.language
            if served is None:
                continue
            if language.startswith(served) or served.startswith(language):
                return config

        if not self.configs:
            raise SynthesisFailedError("No TTS service configured")
        return self.configs[0]

    def route_url(self, language: str) -> str:
        return self.find_config(language).base_url

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            yield client

    async def synthesize(
        self,
        text: str,
        language: str,
        options: Optional[TtsOptions] = None,
    ) -> bytes:
        """Synthesize `text` with the endpoint routed for `language`

        Returns:
            Encoded audio bytes (mp3 for the built-in providers)

        Raises:
            CastEngineError: Classified failure of the last attempt
        """
        config = self.find_config(language)
        options = options or TtsOptions()
        return await self.retry_policy.execute(lambda: self._synthesize_once(config, text, options))

    async def _synthesize_once(self, config: ProviderConfig, text: str, options: TtsOptions) -> bytes:
        protocol = get_speech_protocol(config.provider)
        request = protocol.build_request(config, text, options)

        try:
            async with self._client() as client:
                response = await client.post(request.url, json=request.json, headers=request.headers)
        except httpx.HTTPError as exc:
            raise protocol.classify_transport(exc) from exc

        if not response.is_success:
            raise protocol.classify_status(response.status_code, response.text)

        audio = response.content
        logger.debug(
            "Synthesized segment",
            extra={
                "provider": config.provider.value,
                "language": config.language,
                "text_chars": len(text),
                "audio_bytes": len(audio),
            },
        )
        return audio
