"""
Job record store implementations.

This module provides the JobRecordStore interface and an in-memory
implementation. Each operation is atomic for the single record it touches;
there are no cross-record transactions.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..logging import get_logger
from .types import JobMessage, JobRecord, JobStatus

logger = get_logger(__name__)


@dataclass
class JobFilter:
    """Filter criteria for listing job records.

    Results are ordered by start time, most recent first.
    """
    job_type: str | None = None
    status: JobStatus | set[JobStatus] | None = None
    hostname: str | None = None
    limit: int = 100
    offset: int = 0

    def __post_init__(self):
        if self.limit < 0:
            raise ValueError("limit cannot be negative")
        if self.offset < 0:
            raise ValueError("offset cannot be negative")

    def matches(self, record: JobRecord) -> bool:
        """Check if a record matches this filter."""
        if self.job_type and record.job_type != self.job_type:
            return False
        if self.hostname and record.hostname != self.hostname:
            return False
        if self.status:
            if isinstance(self.status, set):
                if record.status not in self.status:
                    return False
            elif record.status != self.status:
                return False
        return True


class JobRecordStore(ABC):
    """Abstract interface for job record persistence."""

    @abstractmethod
    async def create_or_update(self, record: JobRecord) -> None:
        """Store the record, replacing any record with the same job_id."""
        ...

    @abstractmethod
    async def find_one(self, job_id: str) -> JobRecord | None:
        """Get a record by job_id. Absence is not an error."""
        ...

    @abstractmethod
    async def append_message(self, job_id: str, message: JobMessage) -> None:
        """Append a message to a record's log.

        Appending to an unknown job_id is a no-op in the bundled stores.
        """
        ...

    @abstractmethod
    async def find_latest(self, job_filter: JobFilter | None = None) -> list[JobRecord]:
        """List records matching the filter, most recently started first."""
        ...

    @abstractmethod
    async def count(self, job_filter: JobFilter | None = None) -> int:
        """Count records matching the filter."""
        ...

    async def find_latest_by_type(self, job_type: str) -> JobRecord | None:
        """Most recently started record of a job type."""
        records = await self.find_latest(JobFilter(job_type=job_type, limit=1))
        return records[0] if records else None


class InMemoryJobRecordStore(JobRecordStore):
    """In-memory job record store.

    Suitable for testing and single-process deployments. Records are copied
    on the way in and out so that callers cannot mutate stored state without
    going through the store.
    """

    def __init__(self):
        self._records: dict[str, JobRecord] = {}
        self._lock = asyncio.Lock()

    async def create_or_update(self, record: JobRecord) -> None:
        async with self._lock:
            self._records[record.job_id] = record.copy()

    async def find_one(self, job_id: str) -> JobRecord | None:
        async with self._lock:
            record = self._records.get(job_id)
            return record.copy() if record is not None else None

    async def append_message(self, job_id: str, message: JobMessage) -> None:
        async with self._lock:
            record = self._records.get(job_id)
            if record is None:
                logger.debug("Dropping message for unknown job", extra={"job_id": job_id})
                return
            record.append_message(message)

    async def find_latest(self, job_filter: JobFilter | None = None) -> list[JobRecord]:
        job_filter = job_filter or JobFilter()
        async with self._lock:
            records = [r for r in self._records.values() if job_filter.matches(r)]
            records.sort(key=lambda r: r.started, reverse=True)
            records = records[job_filter.offset:job_filter.offset + job_filter.limit]
            return [r.copy() for r in records]

    async def count(self, job_filter: JobFilter | None = None) -> int:
        async with self._lock:
            if job_filter:
                return sum(1 for r in self._records.values() if job_filter.matches(r))
            return len(self._records)


__all__ = [
    "JobFilter",
    "JobRecordStore",
    "InMemoryJobRecordStore",
]
