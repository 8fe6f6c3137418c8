"""
Learning history repository - Append-only query/podcast rows and word counts.

Classes:
    HistoryRepository: Abstract interface for history rows and word frequency
    FileBasedHistoryRepository: JSON-file implementation
"""

import json
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from threading import RLock
from typing import Any, Dict, Iterable, List

from castengine.core import get_logger
from castengine.core.exceptions import StorageError

logger = get_logger(__name__, component="history_repository")

QUERY_RECORDS_FILE = "query_records.json"
PODCAST_RECORDS_FILE = "podcast_records.json"
WORD_FREQUENCY_FILE = "word_frequency.json"


class HistoryRepository(ABC):
    """
    Abstract repository for learning history.

    Rows are never updated or deleted. Listings are newest first.
    """

    @abstractmethod
    def insert_query(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Append a query row; `created_at` is assigned here"""

    @abstractmethod
    def list_queries(self, offset: int, limit: int) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    def insert_podcast(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Append a podcast row; `created_at` is assigned here"""

    @abstractmethod
    def list_podcasts(self, offset: int, limit: int) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    def increment_words(self, words: Iterable[str], language: str) -> None:
        """
        Add one to the count of every occurrence in `words`.

        A word keeps the language it was first counted under.
        """

    @abstractmethod
    def frequent_words(self, limit: int) -> List[Dict[str, Any]]:
        """Most counted words first"""


class FileBasedHistoryRepository(HistoryRepository):
    """Stores each table as a JSON document in one directory"""

    def __init__(self, storage_dir: Path):
        self._storage_dir = Path(storage_dir)
        self._lock = RLock()

    def _path(self, filename: str) -> Path:
        return self._storage_dir / filename

    def _read(self, path: Path, default: Any) -> Any:
        if not path.exists():
            return default
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise StorageError(f"Failed to read {path.name}: {exc}") from exc
        if not isinstance(data, type(default)):
            raise StorageError(f"Corrupt {path.name}: expected a {type(default).__name__}")
        return data

    def _write(self, path: Path, data: Any) -> None:
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            self._storage_dir.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            tmp_path.replace(path)
        except OSError as exc:
            raise StorageError(f"Failed to write {path.name}: {exc}") from exc

    def _append(self, filename: str, record: Dict[str, Any]) -> Dict[str, Any]:
        path = self._path(filename)
        stored = dict(record)
        stored["created_at"] = datetime.now().isoformat()
        with self._lock:
            rows = self._read(path, [])
            rows.append(stored)
            self._write(path, rows)
        logger.debug("Appended history row", extra={"table": path.stem, "row_id": stored.get("id")})
        return dict(stored)

    def _page(self, filename: str, offset: int, limit: int) -> List[Dict[str, Any]]:
        with self._lock:
            rows = self._read(self._path(filename), [])
        # rows are stored in append order
        newest_first = rows[::-1]
        return [dict(row) for row in newest_first[max(offset, 0):max(offset, 0) + max(limit, 0)]]

    def insert_query(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return self._append(QUERY_RECORDS_FILE, record)

    def list_queries(self, offset: int, limit: int) -> List[Dict[str, Any]]:
        return self._page(QUERY_RECORDS_FILE, offset, limit)

    def insert_podcast(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return self._append(PODCAST_RECORDS_FILE, record)

    def list_podcasts(self, offset: int, limit: int) -> List[Dict[str, Any]]:
        return self._page(PODCAST_RECORDS_FILE, offset, limit)

    def increment_words(self, words: Iterable[str], language: str) -> None:
        path = self._path(WORD_FREQUENCY_FILE)
        now = datetime.now().isoformat()
        with self._lock:
            table = self._read(path, {})
            for word in words:
                entry = table.get(word)
                if entry is None:
                    table[word] = {"language": language, "count": 1, "last_queried_at": now}
                else:
                    entry["count"] = int(entry.get("count", 0)) + 1
                    entry["last_queried_at"] = now
            self._write(path, table)

    def frequent_words(self, limit: int) -> List[Dict[str, Any]]:
        with self._lock:
            table = self._read(self._path(WORD_FREQUENCY_FILE), {})
        rows = [{"word": word, **entry} for word, entry in table.items()]
        # stable sort keeps first-seen order among equal counts
        rows.sort(key=lambda row: row["count"], reverse=True)
        return rows[:max(limit, 0)]
