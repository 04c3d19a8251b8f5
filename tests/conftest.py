"""Pytest configuration and fixtures for MicroFounder tests."""
import os
import re

# Local-only stores and dev auth for every test. Must run before settings load.
os.environ["FF_USE_AUTH"] = "false"
os.environ["FF_USE_DATABASE"] = "false"
os.environ["FF_USE_REDIS"] = "false"
os.environ["FF_USE_S3"] = "false"

import pytest
from unittest.mock import AsyncMock, MagicMock

from microfounder.orchestrator.manager import AgentManager
from microfounder.services.buckets import BucketStore
from microfounder.services.memory import MemoryStore
from microfounder.services.sql import SQLStore


def _glob_regex(pattern):
    """Redis MATCH pattern as a regex: *, ? and backslash escapes."""
    out = []
    chars = iter(pattern)
    for ch in chars:
        if ch == "\\":
            out.append(re.escape(next(chars, "\\")))
        elif ch == "*":
            out.append(".*")
        elif ch == "?":
            out.append(".")
        else:
            out.append(re.escape(ch))
    return re.compile("".join(out), re.DOTALL)


class FakeRedis:
    """The slice of redis.asyncio.Redis the memory store uses."""

    def __init__(self):
        self.data = {}

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value):
        self.data[key] = value

    async def delete(self, key):
        self.data.pop(key, None)

    async def scan_iter(self, match=None):
        pattern = _glob_regex(match) if match else None
        for key in list(self.data):
            if pattern is None or pattern.fullmatch(key):
                yield key


class FailingRedis:
    """Every call raises, like a Redis that went away."""

    async def get(self, key):
        raise ConnectionError("redis down")

    async def set(self, key, value):
        raise ConnectionError("redis down")

    async def delete(self, key):
        raise ConnectionError("redis down")

    def scan_iter(self, match=None):
        raise ConnectionError("redis down")


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def memory():
    """Memory store with no remote (local fallback only)."""
    return MemoryStore()


@pytest.fixture
def sql():
    return SQLStore()


@pytest.fixture
def buckets():
    return BucketStore()


@pytest.fixture
def inference():
    """Mock inference client."""
    client = MagicMock()
    client.infer = AsyncMock(return_value="generated text")
    client.chat = AsyncMock(return_value="assistant reply")
    return client


@pytest.fixture
def manager(inference, memory, sql, buckets):
    return AgentManager(inference, memory, sql, buckets)


@pytest.fixture
def sample_business():
    """A business row as onboarding writes it."""
    return {
        "id": "biz-1",
        "user_id": "user-1",
        "type": "SaaS",
        "industry": "Developer tools",
        "stage": "MVP",
        "revenue_model": "subscription",
        "current_revenue": 1200.0,
        "current_expenses": 800.0,
        "answers": "{}",
        "created_at": "2026-01-01T00:00:00+00:00",
    }
