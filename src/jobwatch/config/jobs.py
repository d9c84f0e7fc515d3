"""
Job pipeline configuration: listener, store, runner and management paths.
"""

from __future__ import annotations

from dataclasses import dataclass

from .base import DispatchMode, MissingRecordPolicy, StoreBackendType


@dataclass
class ListenerConfig:
    """Configuration for the persistence listener."""

    missing_record_policy: MissingRecordPolicy = MissingRecordPolicy.IGNORE

    # Hold a per-job lock around find -> mutate -> persist
    serialize_per_job: bool = True

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not isinstance(self.missing_record_policy, MissingRecordPolicy):
            try:
                self.missing_record_policy = MissingRecordPolicy(str(self.missing_record_policy).lower())
            except ValueError as exc:
                valid = [p.value for p in MissingRecordPolicy]
                raise ValueError(
                    f"Invalid missing_record_policy: {self.missing_record_policy}. Must be one of {valid}"
                ) from exc


@dataclass
class StoreConfig:
    """Configuration for the job record store."""

    backend: StoreBackendType = "memory"

    # Redis settings
    redis_url: str = "redis://localhost:6379/0"
    key_prefix: str = "jobwatch:job"

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.backend not in ("memory", "redis"):
            raise ValueError(f"Invalid store backend: {self.backend}")
        if not self.key_prefix:
            raise ValueError("key_prefix cannot be empty")
        if self.backend == "redis" and not self.redis_url.startswith(("redis://", "rediss://", "unix://")):
            raise ValueError("redis_url must be a redis://, rediss:// or unix:// URL")


@dataclass
class BusConfig:
    """Configuration for the in-process event bus."""

    dispatch: DispatchMode = "sync"

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.dispatch not in ("sync", "task"):
            raise ValueError(f"Invalid dispatch mode: {self.dispatch}")


@dataclass
class RunnerConfig:
    """Configuration for the job runner."""

    keep_alive_interval: float = 30.0

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.keep_alive_interval <= 0:
            raise ValueError("keep_alive_interval must be positive")


@dataclass
class ManagementConfig:
    """Where status pages live and how this instance identifies itself."""

    base_path: str = "/internal"
    hostname: str | None = None  # None = resolve from the OS
    port: int = 8080

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.base_path and not self.base_path.startswith("/"):
            raise ValueError("base_path must start with '/'")
        self.base_path = self.base_path.rstrip("/")
        if self.port < 1 or self.port > 65535:
            raise ValueError("port must be between 1 and 65535")


__all__ = ["ListenerConfig", "StoreConfig", "BusConfig", "RunnerConfig", "ManagementConfig"]
