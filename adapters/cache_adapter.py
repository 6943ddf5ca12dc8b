import os
import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Protocol, Tuple, runtime_checkable

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@runtime_checkable
class CacheStore(Protocol):
    """Key/value store with absolute expiry, used for tokens and GET payloads."""

    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any, expires_at: datetime) -> None: ...


class InMemoryCache:
    """Process-local cache store."""

    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        self.clock = clock
        self._items: Dict[str, Tuple[Any, datetime]] = {}

    def get(self, key: str) -> Optional[Any]:
        item = self._items.get(key)
        if item is None:
            return None
        value, expires_at = item
        if expires_at <= self.clock():
            del self._items[key]
            return None
        return value

    def set(self, key: str, value: Any, expires_at: datetime) -> None:
        self._items[key] = (value, expires_at)


class FileCache:
    """Cache store keeping one JSON file per key on disk."""

    def __init__(
        self, base_path: str = ".ubiflow-cache", clock: Callable[[], datetime] = _utcnow
    ):
        self.base_path = base_path
        self.clock = clock
        os.makedirs(base_path, exist_ok=True)

    def _get_item_file(self, key: str) -> str:
        """Get path to the file holding ``key``."""
        # Create directory structure: ab/cd/abcd...
        dir_path = os.path.join(self.base_path, key[:2], key[2:4])
        os.makedirs(dir_path, exist_ok=True)
        return os.path.join(dir_path, f"{key}.json")

    def get(self, key: str) -> Optional[Any]:
        file_path = self._get_item_file(key)

        if not os.path.exists(file_path):
            return None

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            expires_at = datetime.fromisoformat(data["expires_at"])
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring unreadable cache file %s: %s", file_path, e)
            return None

        if expires_at <= self.clock():
            os.remove(file_path)
            return None
        return data.get("value")

    def set(self, key: str, value: Any, expires_at: datetime) -> None:
        file_path = self._get_item_file(key)

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump({"expires_at": expires_at.isoformat(), "value": value}, f)
