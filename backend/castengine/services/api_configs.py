"""
Provider configuration service

Saves, lists and deletes provider configurations, and resolves the chat and
speech clients a pipeline run needs from them.
"""

from typing import Any, Dict, List, Optional

import httpx

from castengine.config import RETRY_BASE_DELAY_MS, RETRY_MAX_DELAY_MS, AppSettings
from castengine.core import get_logger
from castengine.core.exceptions import ModelUnavailableError, SynthesisFailedError
from castengine.models import ApiConfig, ModelType, ProviderConfig
from castengine.services.llm import ChatClient
from castengine.services.retry import RetryPolicy
from castengine.services.storage import ApiConfigRepository, SecretStore, api_key_ref
from castengine.services.tts import SpeechClient

logger = get_logger(__name__, component="api_configs")

DEFAULT_SPEECH_LANGUAGE = "en"


def build_retry_policy(settings: AppSettings) -> RetryPolicy:
    return RetryPolicy(
        max_retries=settings.retry_count,
        base_delay_ms=RETRY_BASE_DELAY_MS,
        max_delay_ms=RETRY_MAX_DELAY_MS,
    )


class ApiConfigService:
    """CRUD over provider configurations with keys kept in the secret store"""

    def __init__(self, repository: ApiConfigRepository, secrets: SecretStore):
        self.repository = repository
        self.secrets = secrets

    def save(self, config: ApiConfig) -> ApiConfig:
        """
        Store the key (only when one was sent) and upsert the metadata row.

        Returns:
            The stored configuration, without the plaintext key
        """
        if config.api_key:
            self.secrets.put_key(config.id, config.api_key)

        record: Dict[str, Any] = {
            "id": config.id,
            "name": config.name,
            "provider": config.provider.value,
            "model_type": config.model_type.value,
            "base_url": config.base_url,
            "model_name": config.model_name,
            "api_key_ref": api_key_ref(config.id),
            "language": config.language,
            "is_local": config.is_local,
            "is_active": config.is_active,
        }
        stored = self.repository.upsert(record)

        logger.info(
            "Saved API config",
            extra={
                "config_id": config.id,
                "provider": config.provider.value,
                "model_type": config.model_type.value,
            },
        )
        return ApiConfig.from_record(stored)

    def list(self) -> List[ApiConfig]:
        return [ApiConfig.from_record(row) for row in self.repository.list()]

    def delete(self, config_id: str) -> bool:
        try:
            self.secrets.delete_key(config_id)
        except Exception as exc:
            logger.warning(
                "Failed to delete API key, removing config anyway",
                extra={"config_id": config_id, "error": str(exc)},
            )
        deleted = self.repository.delete(config_id)
        logger.info("Deleted API config", extra={"config_id": config_id, "deleted": deleted})
        return deleted

    def api_key_for(self, config: ApiConfig) -> str:
        """Stored key, or "" for keyless configs; local configs skip the secret store"""
        if config.is_local:
            return ""
        return self.secrets.get_key(config.id) or ""

    def chat_config(self) -> ProviderConfig:
        """
        First active text config, falling back to the first text config.

        Raises:
            ModelUnavailableError: If no text model is configured
        """
        text_configs = [c for c in self.list() if c.model_type == ModelType.TEXT]
        if not text_configs:
            raise ModelUnavailableError("No text model configured")

        chosen = next((c for c in text_configs if c.is_active), text_configs[0])
        return chosen.to_provider_config(self.api_key_for(chosen))

    def speech_configs(self) -> List[ProviderConfig]:
        """
        Every TTS config, in creation order; a config without a language serves "en".

        Raises:
            SynthesisFailedError: If no TTS service is configured
        """
        tts_configs = [c for c in self.list() if c.model_type == ModelType.TTS]
        if not tts_configs:
            raise SynthesisFailedError("No TTS service configured")

        return [
            c.to_provider_config(self.api_key_for(c), default_language=DEFAULT_SPEECH_LANGUAGE)
            for c in tts_configs
        ]


class ConfigClientResolver:
    """Builds per-run clients from stored configs and the current settings"""

    def __init__(
        self,
        service: ApiConfigService,
        settings: AppSettings,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.service = service
        self.retry_policy = build_retry_policy(settings)
        self.http_client = http_client

    def chat_client(self) -> ChatClient:
        return ChatClient(self.service.chat_config(), self.retry_policy, http_client=self.http_client)

    def speech_client(self) -> SpeechClient:
        return SpeechClient(self.service.speech_configs(), self.retry_policy, http_client=self.http_client)
