"""
Factories that wire the job event pipeline from Settings.

This module provides:
- build_store / build_listener: single components from configuration
- create_job_pipeline: bus, store, listener, runner and nav bars in one object
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .clock import Clock, SystemClock
from .config import Settings, get_settings
from .events.bus import EventSubscription, InMemoryJobEventBus
from .events.listener import PersistenceJobEventListener
from .jobs.store import InMemoryJobRecordStore, JobRecordStore
from .logging import configure_logging, get_logger
from .navigation import NavBar, jobs_nav_item, main_nav_bar, right_nav_bar
from .runner import JobRunner
from .system_info import SystemInfo

logger = get_logger(__name__)


def build_system_info(settings: Settings) -> SystemInfo:
    return SystemInfo.from_environment(
        port=settings.management.port,
        hostname=settings.management.hostname,
    )


def build_store(settings: Settings, clock: Clock | None = None) -> JobRecordStore:
    """Create the record store selected by ``settings.store.backend``."""
    if settings.store.backend == "redis":
        from .storage.redis import RedisJobRecordStore

        return RedisJobRecordStore.from_url(
            settings.store.redis_url,
            key_prefix=settings.store.key_prefix,
            clock=clock,
        )
    return InMemoryJobRecordStore()


def build_listener(
    settings: Settings,
    store: JobRecordStore,
    clock: Clock | None = None,
    system_info: SystemInfo | None = None,
) -> PersistenceJobEventListener:
    return PersistenceJobEventListener(
        store,
        clock or SystemClock(),
        system_info or build_system_info(settings),
        missing_record_policy=settings.listener.missing_record_policy,
        serialize_per_job=settings.listener.serialize_per_job,
    )


@dataclass
class JobPipeline:
    """Everything a service needs to run jobs and show their state."""
    settings: Settings
    clock: Clock
    system_info: SystemInfo
    store: JobRecordStore
    bus: InMemoryJobEventBus
    listener: PersistenceJobEventListener
    runner: JobRunner
    main_nav_bar: NavBar
    right_nav_bar: NavBar
    subscriptions: list[EventSubscription] = field(default_factory=list)

    async def close(self) -> None:
        """Let running jobs finish, flush pending events and close the store."""
        await self.runner.shutdown()
        await self.bus.close()
        close_store = getattr(self.store, "close", None)
        if close_store is not None:
            await close_store()


def create_job_pipeline(
    settings: Settings | None = None,
    *,
    clock: Clock | None = None,
    store: JobRecordStore | None = None,
    setup_logging: bool = True,
) -> JobPipeline:
    """Assemble a pipeline from settings (global settings when omitted).

    ``settings.logging`` is applied through ``configure_logging`` unless
    ``setup_logging`` is false, for hosts that configure logging themselves.
    """
    settings = settings or get_settings()
    if setup_logging:
        configure_logging(settings.logging)
    clock = clock or SystemClock()
    system_info = build_system_info(settings)
    store = store or build_store(settings, clock)

    bus = InMemoryJobEventBus(dispatch=settings.bus.dispatch)
    listener = build_listener(settings, store, clock, system_info)
    subscriptions = listener.subscribe(bus)

    runner = JobRunner(
        bus,
        management_base_path=settings.management.base_path,
        keep_alive_interval=settings.runner.keep_alive_interval,
    )

    right = right_nav_bar(settings.management.base_path)
    right.register(jobs_nav_item(settings.management.base_path))

    logger.debug(
        "Job pipeline created",
        extra={"store_backend": settings.store.backend, "hostname": system_info.hostname},
    )

    return JobPipeline(
        settings=settings,
        clock=clock,
        system_info=system_info,
        store=store,
        bus=bus,
        listener=listener,
        runner=runner,
        main_nav_bar=main_nav_bar(),
        right_nav_bar=right,
        subscriptions=subscriptions,
    )


__all__ = [
    "JobPipeline",
    "build_system_info",
    "build_store",
    "build_listener",
    "create_job_pipeline",
]
