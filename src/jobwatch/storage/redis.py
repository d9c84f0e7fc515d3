"""
Redis-backed job record store.

Key layout (``prefix`` defaults to ``jobwatch:job``):
- ``{prefix}:{job_id}``           JSON of the record without its messages
- ``{prefix}:{job_id}:messages``  list of JSON messages, in append order
- ``{prefix}:index``              sorted set of job ids scored by start time

Requires redis (async): pip install redis

Durability follows the Redis server configuration. Records never expire;
retention is left to the operator.
"""

from __future__ import annotations

import json
from typing import Any

try:
    import redis.asyncio as redis
    REDIS_AVAILABLE = True
except ImportError:
    redis = None  # type: ignore
    REDIS_AVAILABLE = False

from ..clock import Clock
from ..jobs.store import JobFilter, JobRecordStore
from ..jobs.types import JobMessage, JobRecord
from ..logging import get_logger

logger = get_logger(__name__)


def _require_redis() -> None:
    """Raise ImportError if redis is not available."""
    if not REDIS_AVAILABLE:
        raise ImportError(
            "Redis storage requires redis. "
            "Install with: pip install redis"
        )


def _text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


class RedisJobRecordStore(JobRecordStore):
    """Job record store on top of an async Redis client.

    ``create_or_update`` writes the record, its full message list and the
    index entry in one MULTI/EXEC transaction. ``append_message`` pushes onto
    the message list only when the record exists.

    Example:
        ```python
        store = RedisJobRecordStore.from_url("redis://localhost:6379/0")
        await store.create_or_update(record)
        ```
    """

    def __init__(
        self,
        client: Any,  # redis.Redis
        key_prefix: str = "jobwatch:job",
        clock: Clock | None = None,
    ):
        self._client = client
        self._prefix = key_prefix
        self._clock = clock

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "jobwatch:job", clock: Clock | None = None) -> RedisJobRecordStore:
        _require_redis()
        client = redis.from_url(url, decode_responses=True)
        return cls(client, key_prefix=key_prefix, clock=clock)

    def _record_key(self, job_id: str) -> str:
        return f"{self._prefix}:{job_id}"

    def _messages_key(self, job_id: str) -> str:
        return f"{self._prefix}:{job_id}:messages"

    @property
    def _index_key(self) -> str:
        return f"{self._prefix}:index"

    async def create_or_update(self, record: JobRecord) -> None:
        messages_key = self._messages_key(record.job_id)
        async with self._client.pipeline(transaction=True) as pipe:
            pipe.set(self._record_key(record.job_id), json.dumps(record.to_dict(include_messages=False)))
            pipe.delete(messages_key)
            if record.messages:
                pipe.rpush(messages_key, *(json.dumps(m.to_dict()) for m in record.messages))
            pipe.zadd(self._index_key, {record.job_id: record.started.timestamp()})
            await pipe.execute()

    async def find_one(self, job_id: str) -> JobRecord | None:
        async with self._client.pipeline(transaction=False) as pipe:
            pipe.get(self._record_key(job_id))
            pipe.lrange(self._messages_key(job_id), 0, -1)
            raw_record, raw_messages = await pipe.execute()

        if raw_record is None:
            return None

        data = json.loads(_text(raw_record))
        data["messages"] = [json.loads(_text(m)) for m in raw_messages or []]
        return JobRecord.from_dict(data, clock=self._clock)

    async def append_message(self, job_id: str, message: JobMessage) -> None:
        if not await self._client.exists(self._record_key(job_id)):
            logger.debug("Dropping message for unknown job", extra={"job_id": job_id})
            return
        await self._client.rpush(self._messages_key(job_id), json.dumps(message.to_dict()))

    async def find_latest(self, job_filter: JobFilter | None = None) -> list[JobRecord]:
        job_filter = job_filter or JobFilter()
        job_ids = [_text(j) for j in await self._client.zrevrange(self._index_key, 0, -1)]

        matched: list[JobRecord] = []
        skipped = 0
        for job_id in job_ids:
            if len(matched) >= job_filter.limit:
                break
            record = await self.find_one(job_id)
            if record is None or not job_filter.matches(record):
                continue
            if skipped < job_filter.offset:
                skipped += 1
                continue
            matched.append(record)
        return matched

    async def count(self, job_filter: JobFilter | None = None) -> int:
        if job_filter is None:
            return int(await self._client.zcard(self._index_key))
        job_ids = [_text(j) for j in await self._client.zrevrange(self._index_key, 0, -1)]
        total = 0
        for job_id in job_ids:
            record = await self.find_one(job_id)
            if record is not None and job_filter.matches(record):
                total += 1
        return total

    async def close(self) -> None:
        await self._client.aclose()


__all__ = ["RedisJobRecordStore", "REDIS_AVAILABLE"]
