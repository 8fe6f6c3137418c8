"""
Shared service instances.

Each getter lazily builds one process-wide instance backed by the configured
data directories. Routes receive them through FastAPI dependencies, so tests
replace them with `app.dependency_overrides`.
"""

from pathlib import Path
from typing import Optional

from castengine.config import CONFIG_DATA_DIR, SAVED_AUDIO_DIR, TEMP_AUDIO_DIR, AppSettings

from .api_configs import ApiConfigService, ConfigClientResolver
from .insight import TextInsightService
from .learning_records import LearningRecordService
from .pipeline import ClientResolver
from .storage import (
    ApiConfigRepository,
    FileBasedApiConfigRepository,
    FileBasedHistoryRepository,
    FileSecretStore,
    HistoryRepository,
    SecretStore,
)

_repository_instance: Optional[ApiConfigRepository] = None
_secret_store_instance: Optional[SecretStore] = None
_history_instance: Optional[HistoryRepository] = None


def get_config_repository() -> ApiConfigRepository:
    """Get the shared config repository (singleton pattern)."""
    global _repository_instance
    if _repository_instance is None:
        _repository_instance = FileBasedApiConfigRepository(CONFIG_DATA_DIR)
    return _repository_instance


def get_secret_store() -> SecretStore:
    """Get the shared secret store (singleton pattern)."""
    global _secret_store_instance
    if _secret_store_instance is None:
        _secret_store_instance = FileSecretStore(CONFIG_DATA_DIR)
    return _secret_store_instance


def get_config_service() -> ApiConfigService:
    return ApiConfigService(get_config_repository(), get_secret_store())


def get_settings() -> AppSettings:
    return AppSettings.load(get_config_repository())


def get_client_resolver() -> ClientResolver:
    return ConfigClientResolver(get_config_service(), get_settings())


def get_temp_audio_dir() -> Path:
    return TEMP_AUDIO_DIR


def get_saved_audio_dir() -> Path:
    return SAVED_AUDIO_DIR


def get_history_repository() -> HistoryRepository:
    """Get the shared learning history repository (singleton pattern)."""
    global _history_instance
    if _history_instance is None:
        _history_instance = FileBasedHistoryRepository(CONFIG_DATA_DIR)
    return _history_instance


def get_learning_records() -> LearningRecordService:
    return LearningRecordService(get_history_repository())


def get_insight_service() -> TextInsightService:
    return TextInsightService(get_learning_records())
