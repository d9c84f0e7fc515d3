"""
Storage adapters for jobwatch.

- RedisJobRecordStore: Redis-backed JobRecordStore (needs the redis package)
"""

from .redis import REDIS_AVAILABLE, RedisJobRecordStore

__all__ = ["RedisJobRecordStore", "REDIS_AVAILABLE"]
