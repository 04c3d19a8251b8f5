"""
Agent memory: JSON values and append-only logs keyed by (namespace, user).

Remote: Redis (FF_USE_REDIS). Local: in-process FallbackStore.

Usage:
    memory = get_memory_store()
    await memory.append("ceo:recent", user_id, {"role": "user", ...})
    recent = await memory.read("ceo:recent", user_id) or []
"""

import copy
import json
import logging
import re
from typing import Any, Optional

from .fallback import FallbackStore, ResilientStore
from ..core.flags import get_flags

logger = logging.getLogger(__name__)


_GLOB_CHARS = re.compile(r"([*?\[\]\\])")


def _owner(user_id: str) -> str:
    """Key prefix for one user. Escaping ":" keeps one user's prefix from covering another's."""
    return user_id.replace("%", "%25").replace(":", "%3A") + ":"


def _memory_key(key: str, user_id: str) -> str:
    return f"{_owner(user_id)}{key}"


def _glob_escape(text: str) -> str:
    return _GLOB_CHARS.sub(r"\\\1", text)


class MemoryStore(ResilientStore):
    name = "memory"

    async def read(self, key: str, user_id: str) -> Any:
        """Return the stored value, or None. Remote None falls through to local."""
        memory_key = _memory_key(key, user_id)
        try:
            raw = await self._remote().get(memory_key)
            if raw is not None:
                return json.loads(raw)
        except Exception as e:
            self._degrade("read", e)
        # Copies, so callers never mutate the fallback in place
        return copy.deepcopy(self._local.get(memory_key))

    async def write(self, key: str, user_id: str, value: Any) -> None:
        memory_key = _memory_key(key, user_id)
        try:
            await self._remote().set(memory_key, json.dumps(value, default=str))
        except Exception as e:
            self._degrade("write", e)
        # Local copy is kept warm either way
        self._local.set(memory_key, copy.deepcopy(value))

    async def append(self, key: str, user_id: str, value: Any) -> None:
        """
        Read-modify-write. Not atomic: concurrent appends to the same key can
        lose an entry. A non-list existing value becomes [existing, value].
        """
        existing = await self.read(key, user_id)
        if existing is None:
            existing = []
        updated = [*existing, value] if isinstance(existing, list) else [existing, value]
        await self.write(key, user_id, updated)

    async def delete(self, key: str, user_id: str) -> None:
        memory_key = _memory_key(key, user_id)
        try:
            await self._remote().delete(memory_key)
        except Exception as e:
            self._degrade("delete", e)
        self._local.delete(memory_key)

    async def list(self, user_id: str, prefix: Optional[str] = None) -> list[str]:
        """List the user's keys (without the user prefix), optionally filtered."""
        owner = _owner(user_id)
        search = f"{owner}{prefix or ''}"
        try:
            client = self._remote()
            keys = [k async for k in client.scan_iter(match=f"{_glob_escape(search)}*")]
            return [k[len(owner):] for k in keys if k.startswith(search)]
        except Exception as e:
            self._degrade("list", e)
        return [k[len(owner):] for k in self._local.keys() if k.startswith(search)]


# ── Process-wide instance ────────────────────────────────────────────

_store: Optional[MemoryStore] = None


def get_memory_store(fallback: Optional[FallbackStore] = None) -> MemoryStore:
    global _store
    if _store is None:
        remote = None
        if get_flags().use_redis:
            from ..core.redis import get_redis
            remote = get_redis()
        _store = MemoryStore(remote=remote, fallback=fallback)
        logger.info("Memory store ready (remote=%s)", "redis" if remote else "off")
    return _store
