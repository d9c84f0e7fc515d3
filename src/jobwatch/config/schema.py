"""
JSON schemas for configuration validation.
"""

LISTENER_SCHEMA = {
    "type": "object",
    "properties": {
        "missing_record_policy": {"type": "string", "enum": ["ignore", "warn", "create"]},
        "serialize_per_job": {"type": "boolean"},
    },
    "additionalProperties": False,
}

STORE_SCHEMA = {
    "type": "object",
    "properties": {
        "backend": {"type": "string", "enum": ["memory", "redis"]},
        "redis_url": {"type": "string"},
        "key_prefix": {"type": "string", "minLength": 1},
    },
    "additionalProperties": False,
}

BUS_SCHEMA = {
    "type": "object",
    "properties": {
        "dispatch": {"type": "string", "enum": ["sync", "task"]},
    },
    "additionalProperties": False,
}

RUNNER_SCHEMA = {
    "type": "object",
    "properties": {
        "keep_alive_interval": {"type": "number", "exclusiveMinimum": 0},
    },
    "additionalProperties": False,
}

MANAGEMENT_SCHEMA = {
    "type": "object",
    "properties": {
        "base_path": {"type": "string"},
        "hostname": {"type": ["string", "null"]},
        "port": {"type": "integer", "minimum": 1, "maximum": 65535},
    },
    "additionalProperties": False,
}

LOGGING_SCHEMA = {
    "type": "object",
    "properties": {
        "level": {"type": "string", "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]},
        "format": {"type": "string", "enum": ["text", "json"]},
        "colors": {"type": "boolean"},
        "propagate": {"type": "boolean"},
    },
    "additionalProperties": False,
}

CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "listener": LISTENER_SCHEMA,
        "store": STORE_SCHEMA,
        "bus": BUS_SCHEMA,
        "runner": RUNNER_SCHEMA,
        "management": MANAGEMENT_SCHEMA,
        "logging": LOGGING_SCHEMA,
    },
    "additionalProperties": False,
}

__all__ = ["CONFIG_SCHEMA"]
