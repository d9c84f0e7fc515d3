"""
Job definitions and the runnable contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..events.publisher import JobEventPublisher


@dataclass(frozen=True)
class JobDefinition:
    """Static description of a kind of job.

    ``max_age`` is how old the latest run may get before a status page should
    flag the job type; ``keep_alive_interval`` overrides the runner default.
    """

    job_type: str
    job_name: str
    description: str = ""
    max_age: timedelta | None = None
    retries: int = 0
    retry_delay: float = 0.0
    keep_alive_interval: float | None = None

    def __post_init__(self):
        if not self.job_type:
            raise ValueError("job_type cannot be empty")
        if self.retries < 0:
            raise ValueError("retries cannot be negative")
        if self.retry_delay < 0:
            raise ValueError("retry_delay cannot be negative")
        if self.keep_alive_interval is not None and self.keep_alive_interval <= 0:
            raise ValueError("keep_alive_interval must be positive")


class JobRunnable(ABC):
    """A unit of background work.

    Implementations announce progress through the publisher they are handed;
    they never touch the job record store directly.
    """

    @property
    @abstractmethod
    def job_definition(self) -> JobDefinition:
        ...

    @property
    def job_type(self) -> str:
        return self.job_definition.job_type

    @abstractmethod
    async def execute(self, publisher: JobEventPublisher) -> None:
        ...


__all__ = ["JobDefinition", "JobRunnable"]
