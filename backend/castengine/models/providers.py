"""
Provider configuration models

`ApiConfig` is the API schema for a stored provider configuration row.
`ProviderConfig` is the frozen, per-request view handed to a client.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from castengine.core.exceptions import StorageError


class ApiProvider(str, Enum):
    """Supported provider wire formats"""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    ELEVENLABS = "elevenlabs"
    OLLAMA = "ollama"
    CUSTOM = "custom"

    @classmethod
    def from_str(cls, value: str) -> "ApiProvider":
        try:
            return cls(value)
        except ValueError:
            raise StorageError(f"Unknown provider: {value}") from None


class ModelType(str, Enum):
    """What a configured model is used for"""
    TEXT = "text"
    VISION = "vision"
    TTS = "tts"

    @classmethod
    def from_str(cls, value: str) -> "ModelType":
        try:
            return cls(value)
        except ValueError:
            raise StorageError(f"Unknown model type: {value}") from None


@dataclass(frozen=True)
class ProviderConfig:
    """Connection details for one chat or speech endpoint.

    `language` is only meaningful for speech endpoints and drives routing.
    """
    provider: ApiProvider
    base_url: str
    model_name: str
    api_key: str = field(default="", repr=False)
    language: Optional[str] = None

    def endpoint(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}{path}"

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)


class ApiConfig(BaseModel):
    """A stored provider configuration.

    On save the caller sends the plaintext key in `api_key`; on read the key
    is never returned and `api_key_ref` names the secret-store entry instead.
    """
    model_config = ConfigDict(protected_namespaces=())

    id: str
    name: str
    provider: ApiProvider
    model_type: ModelType
    base_url: str
    model_name: str
    api_key: Optional[str] = None
    api_key_ref: Optional[str] = None
    language: Optional[str] = None
    is_local: bool = False
    is_active: bool = False
    created_at: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "ApiConfig":
        """Build from a metadata-store row, validating the enum columns"""
        return cls(
            id=record["id"],
            name=record.get("name", ""),
            provider=ApiProvider.from_str(record["provider"]),
            model_type=ModelType.from_str(record["model_type"]),
            base_url=record["base_url"],
            model_name=record["model_name"],
            api_key=None,
            api_key_ref=record.get("api_key_ref"),
            language=record.get("language"),
            is_local=bool(record.get("is_local", False)),
            is_active=bool(record.get("is_active", False)),
            created_at=record.get("created_at"),
        )

    def to_provider_config(self, api_key: str, default_language: Optional[str] = None) -> ProviderConfig:
        return ProviderConfig(
            provider=self.provider,
            base_url=self.base_url,
            model_name=self.model_name,
            api_key=api_key,
            language=self.language or default_language,
        )


class ConnectionTestResponse(BaseModel):
    ok: bool
