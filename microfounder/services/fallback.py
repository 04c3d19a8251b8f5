"""
Local fallback containers for the resilient stores.

Every store adapter owns one FallbackStore for its lifetime. Mutations are
mirrored into it on remote success and executed against it on remote failure;
reads fall back to it when the remote raises. Process-wide, never persisted.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from typing import Any, Iterator, Optional

from ..core.errors import RemoteUnavailable

logger = logging.getLogger(__name__)


class FallbackStore(ABC):
    """Minimal mapping interface. Swap in a deterministic store in tests."""

    @abstractmethod
    def get(self, key: Any, default: Any = None) -> Any:
        ...

    @abstractmethod
    def set(self, key: Any, value: Any) -> None:
        ...

    @abstractmethod
    def delete(self, key: Any) -> None:
        ...

    @abstractmethod
    def keys(self) -> Iterator[Any]:
        ...

    def __contains__(self, key: Any) -> bool:
        return self.get(key) is not None


class InMemoryStore(FallbackStore):
    def __init__(self):
        self._data: dict = {}

    def get(self, key, default=None):
        return self._data.get(key, default)

    def set(self, key, value) -> None:
        self._data[key] = value

    def delete(self, key) -> None:
        self._data.pop(key, None)

    def keys(self):
        # Snapshot so callers can mutate while iterating
        return iter(list(self._data.keys()))


@dataclass
class AdapterHealth:
    """Degradation record. Lets callers tell a degraded success from a clean one."""

    name: str
    remote_enabled: bool = True
    fallbacks: int = 0
    last_error: Optional[str] = None
    last_degraded_at: Optional[float] = None

    @property
    def degraded(self) -> bool:
        return self.fallbacks > 0

    def to_dict(self) -> dict:
        data = asdict(self)
        data["degraded"] = self.degraded
        return data


class ResilientStore:
    """
    Shared plumbing for the storage adapters.

    Subclasses call _remote() to get the live client (raises RemoteUnavailable
    when disabled) and _degrade() inside their except blocks.
    """

    name: str = "store"

    def __init__(self, remote: Any = None, fallback: Optional[FallbackStore] = None):
        self._client = remote
        self._local = fallback if fallback is not None else InMemoryStore()
        self.health = AdapterHealth(name=self.name, remote_enabled=remote is not None)

    @property
    def local(self) -> FallbackStore:
        return self._local

    def _remote(self) -> Any:
        if self._client is None:
            raise RemoteUnavailable(f"{self.name} remote is disabled")
        return self._client

    def _degrade(self, operation: str, error: Exception) -> None:
        """Record a failover. One shot, no retry of the remote."""
        self.health.fallbacks += 1
        self.health.last_error = f"{operation}: {error}"
        self.health.last_degraded_at = time.time()
        if isinstance(error, RemoteUnavailable) and not self.health.remote_enabled:
            logger.debug("%s %s served locally (remote disabled)", self.name, operation)
        else:
            logger.warning("%s %s failed, using local fallback: %s", self.name, operation, error)
