"""
Audio cache eviction.

Keeps a generated-audio directory bounded in age and total size. Deletes
are best-effort: a file that cannot be removed is logged and counted, and
the pass carries on.
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from castengine.core import get_logger

logger = get_logger(__name__, component="cache_eviction")

SECONDS_PER_DAY = 86_400


@dataclass(frozen=True)
class CacheEntry:
    path: Path
    size_bytes: int
    modified_at: float

    def age_seconds(self, now: float) -> float:
        return now - self.modified_at


def scan_entries(directory: Path) -> List[CacheEntry]:
    """Regular files directly inside `directory`; unreadable entries are skipped"""
    entries: List[CacheEntry] = []
    for path in Path(directory).iterdir():
        try:
            if not path.is_file():
                continue
            stat = path.stat()
        except OSError as exc:
            logger.warning("Failed to stat cache entry", extra={"path": str(path), "error": str(exc)})
            continue
        entries.append(CacheEntry(path=path, size_bytes=stat.st_size, modified_at=stat.st_mtime))
    return entries


def _remove(entry: CacheEntry, summary: Dict[str, Any]) -> bool:
    try:
        entry.path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning(
            "Failed to remove cached audio",
            extra={"path": str(entry.path), "error": str(exc)},
        )
        summary["errors"] += 1
        return False
    summary["freed_bytes"] += entry.size_bytes
    return True


def evict(
    directory: Path,
    max_total_bytes: int,
    max_age_days: int,
    now: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Run one two-phase eviction pass over `directory`.

    Phase 1 removes every file older than `max_age_days`. Phase 2 removes the
    remaining files oldest-first until the total size fits `max_total_bytes`.
    A missing or empty directory is a no-op.

    Args:
        directory: Directory holding the cached files
        max_total_bytes: Size budget for the files that survive phase 1
        max_age_days: Files strictly older than this are expired
        now: Reference UNIX timestamp (defaults to the current time)

    Returns:
        Summary statistics of the pass
    """
    summary: Dict[str, Any] = {
        "directory": str(directory),
        "scanned": 0,
        "expired": 0,
        "evicted_for_size": 0,
        "freed_bytes": 0,
        "remaining_bytes": 0,
        "errors": 0,
    }

    directory = Path(directory)
    if not directory.is_dir():
        return summary

    now_ts = time.time() if now is None else now
    max_age_seconds = max_age_days * SECONDS_PER_DAY

    entries = scan_entries(directory)
    summary["scanned"] = len(entries)
    if not entries:
        return summary

    # Phase 1: age; an expired file leaves consideration even if its delete fails
    survivors: List[CacheEntry] = []
    for entry in entries:
        if entry.age_seconds(now_ts) > max_age_seconds:
            if _remove(entry, summary):
                summary["expired"] += 1
            continue
        survivors.append(entry)

    # Phase 2: size, oldest first
    total = sum(entry.size_bytes for entry in survivors)
    if total > max_total_bytes:
        for entry in sorted(survivors, key=lambda e: e.modified_at):
            if total <= max_total_bytes:
                break
            if _remove(entry, summary):
                summary["evicted_for_size"] += 1
            # failed deletes still reduce the running total
            total -= entry.size_bytes

    summary["remaining_bytes"] = sum(
        entry.size_bytes for entry in survivors if entry.path.exists()
    )

    logger.info("Cache eviction pass complete", extra=summary)
    return summary


def clear_directory(directory: Path) -> Dict[str, Any]:
    """Remove every regular file in `directory`, keeping the directory itself"""
    summary: Dict[str, Any] = {
        "directory": str(directory),
        "deleted": 0,
        "freed_bytes": 0,
        "errors": 0,
    }

    directory = Path(directory)
    if not directory.is_dir():
        return summary

    for entry in scan_entries(directory):
        if _remove(entry, summary):
            summary["deleted"] += 1

    logger.info("Directory cleared", extra=summary)
    return summary
