"""Key-value backends: Redis (remote) and a JSON file (local).

Backends raise on failure; ``StorageChain`` decides what to do about it.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import redis

from travel_days.config import REDIS_SOCKET_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class StorageBackend:
    """Minimal string key-value interface shared by all backends."""

    name = "backend"

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, *keys: str) -> None:
        raise NotImplementedError

    def close(self) -> None:
        pass


class RedisBackend(StorageBackend):
    name = "redis"

    def __init__(self, client: Any):
        self.client = client

    @classmethod
    def from_url(
        cls,
        url: str,
        socket_timeout: float = REDIS_SOCKET_TIMEOUT_SECONDS,
    ) -> "RedisBackend":
        # from_url does not connect; the first command does
        client = redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        return cls(client)

    def get(self, key: str) -> Optional[str]:
        return self.client.get(key)

    def set(self, key: str, value: str) -> None:
        self.client.set(key, value)

    def delete(self, *keys: str) -> None:
        if keys:
            self.client.delete(*keys)

    def close(self) -> None:
        close = getattr(self.client, "close", None)
        if callable(close):
            close()


class LocalFileBackend(StorageBackend):
    """All keys in one JSON object on disk, rewritten on every change."""

    name = "local"

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not contain a JSON object")
        return data

    def _save(self, data: Dict[str, str]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(data, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def delete(self, *keys: str) -> None:
        data = self._load()
        removed = [k for k in keys if data.pop(k, None) is not None]
        if removed:
            self._save(data)
            logger.debug("Deleted %d key(s) from %s", len(removed), self.path)
