"""
Settings master configuration and global helpers.
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import jsonschema
from dotenv import find_dotenv, load_dotenv

from ..errors import ConfigurationError
from .jobs import BusConfig, ListenerConfig, ManagementConfig, RunnerConfig, StoreConfig
from .logging import LoggingConfig
from .schema import CONFIG_SCHEMA

_SECTIONS: dict[str, type] = {
    "listener": ListenerConfig,
    "store": StoreConfig,
    "bus": BusConfig,
    "runner": RunnerConfig,
    "management": ManagementConfig,
    "logging": LoggingConfig,
}


@dataclass
class Settings:
    """
    Master configuration for jobwatch.

    Aggregates all configuration sections into a single object that can be
    loaded from environment variables, files, or constructed programmatically.
    """

    listener: ListenerConfig = field(default_factory=ListenerConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    bus: BusConfig = field(default_factory=BusConfig)
    runner: RunnerConfig = field(default_factory=RunnerConfig)
    management: ManagementConfig = field(default_factory=ManagementConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, prefix: str = "JOBWATCH_") -> Settings:
        """
        Load settings from environment variables.

        Example:
            JOBWATCH_STORE_BACKEND=redis
            JOBWATCH_REDIS_URL=redis://cache:6379/1
            JOBWATCH_MISSING_RECORD_POLICY=warn
        """
        data: dict[str, dict[str, Any]] = {}

        def put(section: str, key: str, value: Any) -> None:
            data.setdefault(section, {})[key] = value

        # Listener settings
        if policy := os.getenv(f"{prefix}MISSING_RECORD_POLICY"):
            put("listener", "missing_record_policy", policy.lower())
        if serialize := os.getenv(f"{prefix}SERIALIZE_PER_JOB"):
            put("listener", "serialize_per_job", serialize.lower() == "true")

        # Store settings
        if backend := os.getenv(f"{prefix}STORE_BACKEND"):
            put("store", "backend", backend.lower())
        if url := os.getenv(f"{prefix}REDIS_URL"):
            put("store", "redis_url", url)
        if key_prefix := os.getenv(f"{prefix}STORE_KEY_PREFIX"):
            put("store", "key_prefix", key_prefix)

        # Bus settings
        if dispatch := os.getenv(f"{prefix}BUS_DISPATCH"):
            put("bus", "dispatch", dispatch.lower())

        # Runner settings
        if interval := os.getenv(f"{prefix}KEEP_ALIVE_INTERVAL"):
            put("runner", "keep_alive_interval", float(interval))

        # Management settings
        if base_path := os.getenv(f"{prefix}MANAGEMENT_BASE_PATH"):
            put("management", "base_path", base_path)
        if hostname := os.getenv(f"{prefix}HOSTNAME"):
            put("management", "hostname", hostname)
        if port := os.getenv(f"{prefix}PORT"):
            put("management", "port", int(port))

        # Logging settings
        if level := os.getenv(f"{prefix}LOG_LEVEL"):
            put("logging", "level", level.upper())
        if log_format := os.getenv(f"{prefix}LOG_FORMAT"):
            put("logging", "format", log_format.lower())

        return cls._from_dict(data)

    @classmethod
    def from_file(cls, path: str | Path) -> Settings:
        """
        Load settings from a YAML or TOML file.

        Args:
            path: Path to configuration file (.yaml, .yml, or .toml)
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        suffix = path.suffix.lower()

        if suffix in (".yaml", ".yml"):
            import yaml

            with open(path) as f:
                data = yaml.safe_load(f) or {}
        elif suffix == ".toml":
            import tomllib

            with open(path, "rb") as f:
                data = tomllib.load(f)
        else:
            raise ConfigurationError(f"Unsupported config file format: {suffix}")

        return cls._from_dict(data)

    @classmethod
    def default(cls) -> Settings:
        """Create default configuration."""
        return cls()

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> Settings:
        """
        Create Settings from a dictionary.

        The dictionary is validated against the configuration schema before
        any section is built.
        """
        try:
            jsonschema.validate(instance=data, schema=CONFIG_SCHEMA)
        except jsonschema.ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e.message}") from e

        sections: dict[str, Any] = {}
        for name, section_cls in _SECTIONS.items():
            if name in data:
                try:
                    sections[name] = section_cls(**data[name])
                except ValueError as e:
                    raise ConfigurationError(f"Invalid '{name}' configuration: {e}") from e

        return cls(**sections)

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to dictionary."""

        def convert(obj):
            if dataclasses.is_dataclass(obj):
                return {f.name: convert(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
            if isinstance(obj, Enum):
                return obj.value
            return obj

        return convert(self)


# =============================================================================
# Global Settings & Helpers
# =============================================================================

_global_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance, creating it from the environment if needed."""
    global _global_settings
    if _global_settings is None:
        _global_settings = Settings.from_env()
    return _global_settings


def configure(settings: Settings | None = None, **kwargs) -> Settings:
    """
    Configure global settings.

    Args:
        settings: Settings object to use globally
        **kwargs: Replace whole sections, e.g. ``store=StoreConfig(...)``
    """
    global _global_settings

    if settings is not None:
        _global_settings = settings
    elif _global_settings is None:
        _global_settings = Settings.from_env()

    for key, value in kwargs.items():
        if key not in _SECTIONS:
            raise ConfigurationError(f"Unknown settings section: {key}")
        setattr(_global_settings, key, value)

    return _global_settings


def reset_settings() -> None:
    """Drop the global settings instance (mainly for tests)."""
    global _global_settings
    _global_settings = None


def load_env(path: str | None = None, *, override: bool = False) -> bool:
    """
    Load environment variables from a .env file.

    Returns:
        True if a .env file was found and loaded, False otherwise.
    """
    env_path = path or find_dotenv(usecwd=True)
    if not env_path:
        return False
    return load_dotenv(env_path, override=override)


__all__ = ["Settings", "get_settings", "configure", "reset_settings", "load_env"]
