"""
Provider configuration repository - Abstract data access for API configs and settings.

Implements the Repository pattern so the config service and the routes do
not depend on how metadata is stored. Rows are plain dicts with string
columns; `ApiConfig.from_record` validates them on the way out.

Classes:
    ApiConfigRepository: Abstract interface for config rows and settings
    FileBasedApiConfigRepository: JSON-file implementation
"""

import json
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from threading import RLock
from typing import Any, Dict, List, Optional

from castengine.core import get_logger
from castengine.core.exceptions import StorageError

logger = get_logger(__name__, component="config_repository")

API_CONFIGS_FILE = "api_configs.json"
SETTINGS_FILE = "settings.json"


class ApiConfigRepository(ABC):
    """
    Abstract repository for provider configuration rows and key/value settings.

    Also satisfies the SettingsStore protocol used by AppSettings.
    """

    @abstractmethod
    def upsert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a row or update the row with the same id.

        `created_at` is assigned on insert and preserved on update.

        Returns:
            The stored row
        """

    @abstractmethod
    def list(self) -> List[Dict[str, Any]]:
        """All rows, oldest first"""

    @abstractmethod
    def get(self, config_id: str) -> Optional[Dict[str, Any]]:
        """Row by id, or None"""

    @abstractmethod
    def delete(self, config_id: str) -> bool:
        """
        Delete a row.

        Returns:
            True if a row was removed
        """

    @abstractmethod
    def get_setting(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set_setting(self, key: str, value: str) -> None:
        pass


class FileBasedApiConfigRepository(ApiConfigRepository):
    """Stores rows and settings as two JSON documents in one directory"""

    def __init__(self, storage_dir: Path):
        self._storage_dir = Path(storage_dir)
        self._lock = RLock()

    @property
    def configs_file(self) -> Path:
        return self._storage_dir / API_CONFIGS_FILE

    @property
    def settings_file(self) -> Path:
        return self._storage_dir / SETTINGS_FILE

    def _read(self, path: Path, default: Any) -> Any:
        if not path.exists():
            return default
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as exc:
            raise StorageError(f"Failed to read {path.name}: {exc}") from exc

    def _write(self, path: Path, data: Any) -> None:
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            self._storage_dir.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            tmp_path.replace(path)
        except OSError as exc:
            raise StorageError(f"Failed to write {path.name}: {exc}") from exc

    def _load_rows(self) -> List[Dict[str, Any]]:
        rows = self._read(self.configs_file, [])
        if not isinstance(rows, list):
            raise StorageError(f"Corrupt {API_CONFIGS_FILE}: expected a list")
        return rows

    def upsert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            rows = self._load_rows()
            stored = dict(record)

            for index, existing in enumerate(rows):
                if existing.get("id") == record["id"]:
                    stored["created_at"] = existing.get("created_at") or datetime.now().isoformat()
                    rows[index] = stored
                    break
            else:
                stored["created_at"] = datetime.now().isoformat()
                rows.append(stored)

            self._write(self.configs_file, rows)
            logger.debug("Saved API config row", extra={"config_id": record["id"]})
            return dict(stored)

    def list(self) -> List[Dict[str, Any]]:
        with self._lock:
            rows = self._load_rows()
        # stable sort keeps insertion order for equal timestamps
        return sorted((dict(row) for row in rows), key=lambda row: row.get("created_at") or "")

    def get(self, config_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            for row in self._load_rows():
                if row.get("id") == config_id:
                    return dict(row)
        return None

    def delete(self, config_id: str) -> bool:
        with self._lock:
            rows = self._load_rows()
            kept = [row for row in rows if row.get("id") != config_id]
            if len(kept) == len(rows):
                return False
            self._write(self.configs_file, kept)
        logger.debug("Deleted API config row", extra={"config_id": config_id})
        return True

    def get_setting(self, key: str) -> Optional[str]:
        with self._lock:
            settings = self._read(self.settings_file, {})
        value = settings.get(key)
        return None if value is None else str(value)

    def set_setting(self, key: str, value: str) -> None:
        with self._lock:
            settings = self._read(self.settings_file, {})
            settings[key] = value
            self._write(self.settings_file, settings)
