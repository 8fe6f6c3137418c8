"""
API key storage

Keys never live in the config rows; a row only carries `api_key_<id>` as a
reference. The file-based store is meant for development and single-user
installs (the file is created with owner-only permissions).
"""

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from threading import RLock
from typing import Dict, Optional

from castengine.core import get_logger
from castengine.core.exceptions import StorageError

logger = get_logger(__name__, component="secret_store")

SECRETS_FILE = "secrets.json"


def api_key_ref(config_id: str) -> str:
    return f"api_key_{config_id}"


class SecretStore(ABC):
    """Stores one API key per provider configuration id"""

    @abstractmethod
    def put_key(self, config_id: str, key: str) -> None:
        pass

    @abstractmethod
    def get_key(self, config_id: str) -> Optional[str]:
        pass

    @abstractmethod
    def delete_key(self, config_id: str) -> None:
        """Remove a key; a missing key is not an error"""


class InMemorySecretStore(SecretStore):

    def __init__(self) -> None:
        self._keys: Dict[str, str] = {}
        self._lock = RLock()

    def put_key(self, config_id: str, key: str) -> None:
        with self._lock:
            self._keys[api_key_ref(config_id)] = key

    def get_key(self, config_id: str) -> Optional[str]:
        with self._lock:
            return self._keys.get(api_key_ref(config_id))

    def delete_key(self, config_id: str) -> None:
        with self._lock:
            self._keys.pop(api_key_ref(config_id), None)


class FileSecretStore(SecretStore):
    """JSON document of `api_key_<id>` -> key, readable by the owner only"""

    def __init__(self, storage_dir: Path):
        self._path = Path(storage_dir) / SECRETS_FILE
        self._lock = RLock()

    def _load(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as exc:
            raise StorageError(f"Failed to read secret store: {exc}") from exc

    def _save(self, secrets: Dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(secrets, f)
        except OSError as exc:
            raise StorageError(f"Failed to write secret store: {exc}") from exc

    def put_key(self, config_id: str, key: str) -> None:
        with self._lock:
            secrets = self._load()
            secrets[api_key_ref(config_id)] = key
            self._save(secrets)
        logger.debug("Stored API key", extra={"config_id": config_id})

    def get_key(self, config_id: str) -> Optional[str]:
        with self._lock:
            return self._load().get(api_key_ref(config_id))

    def delete_key(self, config_id: str) -> None:
        with self._lock:
            secrets = self._load()
            if secrets.pop(api_key_ref(config_id), None) is not None:
                self._save(secrets)
