"""Ranked fallback over storage backends.

Each call tries the backends in order and stops at the first that succeeds.
The returned ``StorageResult`` names the backend that served the call.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from redis.exceptions import RedisError

from travel_days.models import SyncStatus
from travel_days.storage.backends import StorageBackend

logger = logging.getLogger(__name__)


# json.JSONDecodeError is a ValueError (corrupt local file)
BACKEND_ERRORS = (RedisError, OSError, ValueError)


class StorageUnavailableError(RuntimeError):
    def __init__(self, operation: str, errors: List[str]):
        self.operation = operation
        self.errors = errors
        super().__init__(f"No storage backend could {operation}: " + "; ".join(errors))


@dataclass
class StorageResult:
    value: Optional[str]
    backend: str
    rank: int
    errors: List[str] = field(default_factory=list)  # failures of higher-ranked backends

    @property
    def status(self) -> SyncStatus:
        return SyncStatus.CONNECTED if self.rank == 0 else SyncStatus.FALLBACK

    def json(self, default=None):
        if self.value is None:
            return default
        return json.loads(self.value)


class StorageChain:
    def __init__(self, backends: Sequence[StorageBackend]):
        if not backends:
            raise ValueError("StorageChain needs at least one backend")
        self.backends = list(backends)

    @property
    def names(self) -> List[str]:
        return [b.name for b in self.backends]

    def close(self) -> None:
        for backend in self.backends:
            backend.close()

    def _run(self, operation: str, call: Callable[[StorageBackend], Optional[str]]) -> StorageResult:
        errors: List[str] = []
        for rank, backend in enumerate(self.backends):
            try:
                value = call(backend)
            except BACKEND_ERRORS as e:
                logger.warning("Storage %s failed on %s: %s", operation, backend.name, e)
                errors.append(f"{backend.name}: {e}")
                continue
            if errors:
                logger.info("Storage %s served by fallback backend %s", operation, backend.name)
            return StorageResult(value=value, backend=backend.name, rank=rank, errors=errors)
        raise StorageUnavailableError(operation, errors)

    def read(self, key: str) -> StorageResult:
        return self._run(f"read {key}", lambda b: b.get(key))

    def write(self, key: str, value: str) -> StorageResult:
        def call(b: StorageBackend):
            b.set(key, value)
            return value
        return self._run(f"write {key}", call)

    def write_many(self, items: dict) -> StorageResult:
        """Write several keys to the same backend; falls back as a unit."""
        def call(b: StorageBackend):
            for k, v in items.items():
                b.set(k, v)
            return None
        return self._run("write " + ", ".join(items), call)

    def delete(self, *keys: str) -> StorageResult:
        """Delete keys from every backend that can be reached.

        The result names the highest-ranked backend that succeeded.
        """
        errors: List[str] = []
        served: Optional[StorageResult] = None
        for rank, backend in enumerate(self.backends):
            try:
                backend.delete(*keys)
            except BACKEND_ERRORS as e:
                logger.warning("Storage delete failed on %s: %s", backend.name, e)
                errors.append(f"{backend.name}: {e}")
                continue
            if served is None:
                served = StorageResult(value=None, backend=backend.name, rank=rank)
        if served is None:
            raise StorageUnavailableError("delete " + ", ".join(keys), errors)
        served.errors = errors
        return served
