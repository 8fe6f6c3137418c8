"""
Storage services: audio cache housekeeping, config rows, API keys and learning history
"""

from .cache_eviction import CacheEntry, scan_entries, evict, clear_directory
from .config_repository import ApiConfigRepository, FileBasedApiConfigRepository
from .history_repository import HistoryRepository, FileBasedHistoryRepository
from .secret_store import SecretStore, InMemorySecretStore, FileSecretStore, api_key_ref

__all__ = [
    "CacheEntry",
    "scan_entries",
    "evict",
    "clear_directory",
    "ApiConfigRepository",
    "FileBasedApiConfigRepository",
    "HistoryRepository",
    "FileBasedHistoryRepository",
    "SecretStore",
    "InMemorySecretStore",
    "FileSecretStore",
    "api_key_ref",
]
