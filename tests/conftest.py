"""
Shared test fixtures for jobwatch tests.

This module provides:
- A fixed clock and system info
- Sample job runnables
- A mocked record store
- An in-memory Redis stand-in for the Redis store tests
- Reset of the jobwatch logger between tests
"""

from __future__ import annotations

import fnmatch
import logging
from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock

import pytest

from jobwatch.clock import FixedClock
from jobwatch.jobs.definition import JobDefinition, JobRunnable
from jobwatch.jobs.store import JobRecordStore
from jobwatch.logging import ROOT_LOGGER_NAME
from jobwatch.system_info import SystemInfo

T0 = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Job Runnables
# =============================================================================


class SomeJob(JobRunnable):
    """Runnable that runs ``body`` (if any) and records its publisher."""

    def __init__(self, body=None, job_type: str = "someJobType", **definition: Any):
        self._definition = JobDefinition(job_type=job_type, job_name="someName", **definition)
        self._body = body
        self.attempts = 0

    @property
    def job_definition(self) -> JobDefinition:
        return self._definition

    async def execute(self, publisher) -> None:
        self.attempts += 1
        if self._body is not None:
            await self._body(self, publisher)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(T0)


@pytest.fixture
def system_info() -> SystemInfo:
    return SystemInfo("localhost", 8080)


@pytest.fixture
def some_job() -> SomeJob:
    return SomeJob()


@pytest.fixture
def job_factory() -> type[SomeJob]:
    return SomeJob


@pytest.fixture
def mock_store() -> AsyncMock:
    store = AsyncMock(spec=JobRecordStore)
    store.find_one.return_value = None
    return store


# =============================================================================
# Redis stand-in
# =============================================================================


class FakePipeline:
    """Buffers commands and runs them against FakeRedis on execute()."""

    def __init__(self, redis: FakeRedis):
        self._redis = redis
        self._commands: list[tuple[str, tuple, dict]] = []

    def __getattr__(self, name: str):
        def buffer(*args, **kwargs):
            self._commands.append((name, args, kwargs))
            return self
        return buffer

    async def execute(self) -> list[Any]:
        results = []
        for name, args, kwargs in self._commands:
            results.append(await getattr(self._redis, name)(*args, **kwargs))
        self._commands.clear()
        return results

    async def __aenter__(self) -> FakePipeline:
        return self

    async def __aexit__(self, *exc) -> None:
        self._commands.clear()


class FakeRedis:
    """The handful of async Redis commands the record store uses."""

    def __init__(self):
        self.strings: dict[str, str] = {}
        self.lists: dict[str, list[str]] = {}
        self.zsets: dict[str, dict[str, float]] = {}
        self.closed = False

    def pipeline(self, transaction: bool = True) -> FakePipeline:
        return FakePipeline(self)

    async def set(self, key: str, value: str) -> bool:
        self.strings[key] = value
        return True

    async def get(self, key: str) -> str | None:
        return self.strings.get(key)

    async def exists(self, key: str) -> int:
        return int(key in self.strings or key in self.lists)

    async def delete(self, key: str) -> int:
        removed = 0
        for table in (self.strings, self.lists, self.zsets):
            if table.pop(key, None) is not None:
                removed += 1
        return removed

    async def rpush(self, key: str, *values: str) -> int:
        self.lists.setdefault(key, []).extend(values)
        return len(self.lists[key])

    async def lrange(self, key: str, start: int, end: int) -> list[str]:
        items = self.lists.get(key, [])
        return items[start:] if end == -1 else items[start:end + 1]

    async def zadd(self, key: str, mapping: dict[str, float]) -> int:
        zset = self.zsets.setdefault(key, {})
        added = sum(1 for member in mapping if member not in zset)
        zset.update(mapping)
        return added

    async def zrevrange(self, key: str, start: int, end: int) -> list[str]:
        members = sorted(self.zsets.get(key, {}).items(), key=lambda kv: kv[1], reverse=True)
        names = [m for m, _ in members]
        return names[start:] if end == -1 else names[start:end + 1]

    async def zcard(self, key: str) -> int:
        return len(self.zsets.get(key, {}))

    async def aclose(self) -> None:
        self.closed = True

    def keys_matching(self, pattern: str) -> list[str]:
        keys = [*self.strings, *self.lists, *self.zsets]
        return sorted(k for k in keys if fnmatch.fnmatch(k, pattern))


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(autouse=True)
def reset_jobwatch_logger():
    """Undo configure_logging calls made by a test (pipelines apply settings.logging)."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    level, propagate = logger.level, logger.propagate
    yield
    for handler in list(logger.handlers):
        if getattr(handler, "_jobwatch_handler", False):
            logger.removeHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate
