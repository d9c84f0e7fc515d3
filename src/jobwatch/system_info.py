"""
Identity of the service instance that runs jobs.
"""

from __future__ import annotations

import socket
from dataclasses import dataclass


@dataclass(frozen=True)
class SystemInfo:
    """Host name and port of the current service instance."""

    hostname: str
    port: int = 8080

    def __post_init__(self):
        if not self.hostname:
            raise ValueError("hostname cannot be empty")
        if self.port < 1 or self.port > 65535:
            raise ValueError("port must be between 1 and 65535")

    @classmethod
    def from_environment(cls, port: int = 8080, hostname: str | None = None) -> SystemInfo:
        """Resolve the host name from the operating system unless given."""
        return cls(hostname=hostname or socket.gethostname(), port=port)


__all__ = ["SystemInfo"]
