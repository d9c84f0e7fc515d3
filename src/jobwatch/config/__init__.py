"""
Configuration system for jobwatch.

This package provides typed configuration classes with:
- Dataclass-based settings with validation
- Environment variable loading
- YAML/TOML file loading
"""

from .base import DispatchMode, LogFormat, LogLevel, MissingRecordPolicy, StoreBackendType
from .jobs import BusConfig, ListenerConfig, ManagementConfig, RunnerConfig, StoreConfig
from .logging import LoggingConfig
from .settings import Settings, configure, get_settings, load_env, reset_settings

__all__ = [
    # Types
    "DispatchMode",
    "LogFormat",
    "LogLevel",
    "MissingRecordPolicy",
    "StoreBackendType",
    # Sections
    "BusConfig",
    "ListenerConfig",
    "ManagementConfig",
    "RunnerConfig",
    "StoreConfig",
    "LoggingConfig",
    # Master config
    "Settings",
    # Global functions
    "get_settings",
    "configure",
    "reset_settings",
    "load_env",
]
