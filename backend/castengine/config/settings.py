"""
User-facing application settings

Settings live as string key/value pairs in the metadata store. Loading falls
back to the default for every key that is missing or unparsable, so a
partially written settings table never breaks a pipeline run.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Callable, Dict, Optional, Protocol


class SettingsStore(Protocol):
    """Key/value settings persistence (provided by the metadata store)"""

    def get_setting(self, key: str) -> Optional[str]:
        ...

    def set_setting(self, key: str, value: str) -> None:
        ...


def _parse_bool(raw: str) -> bool:
    return raw == "true"


def _format(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class AppSettings:
    """Settings that drive retries and cache housekeeping"""

    ai_completion_enabled: bool = True
    cache_max_size_mb: int = 500
    cache_auto_clean_days: int = 30
    retry_count: int = 3
    shortcut_capture: str = "CommandOrControl+Shift+S"
    locale: str = "en-US"

    @property
    def cache_max_bytes(self) -> int:
        return self.cache_max_size_mb * 1024 * 1024

    @classmethod
    def load(cls, store: SettingsStore) -> "AppSettings":
        """Load settings, using the default for any missing or invalid key"""
        defaults = cls()
        values: Dict[str, Any] = {}

        for f in fields(cls):
            default = getattr(defaults, f.name)
            raw = store.get_setting(f.name)
            if raw is None:
                values[f.name] = default
                continue

            parser: Callable[[str], Any]
            if isinstance(default, bool):
                parser = _parse_bool
            elif isinstance(default, int):
                parser = int
            else:
                parser = str

            try:
                parsed = parser(raw)
            except ValueError:
                parsed = default
            if isinstance(parsed, int) and not isinstance(parsed, bool) and parsed < 0:
                parsed = default
            values[f.name] = parsed

        return cls(**values)

    def save(self, store: SettingsStore) -> None:
        for key, value in asdict(self).items():
            store.set_setting(key, _format(value))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
