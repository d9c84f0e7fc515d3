"""
Job domain for jobwatch.

This module provides:
- JobDefinition / JobRunnable: what a job is and how it runs
- JobRecord: persisted state of one job execution
- JobRecordStore: persistence interface with an in-memory implementation
"""

from .definition import (
    JobDefinition,
    JobRunnable,
)
from .types import (
    JobStatus,
    JobMessageLevel,
    JobMessage,
    JobRecord,
)
from .store import (
    JobFilter,
    JobRecordStore,
    InMemoryJobRecordStore,
)

__all__ = [
    "JobDefinition",
    "JobRunnable",
    "JobStatus",
    "JobMessageLevel",
    "JobMessage",
    "JobRecord",
    "JobFilter",
    "JobRecordStore",
    "InMemoryJobRecordStore",
]
