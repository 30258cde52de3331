"""File system configuration seeded from environment variables."""

import os
from dataclasses import dataclass, field, replace
from typing import Any


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value else default


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


ENV_PREFIX = "SANDBOX_FS_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_root() -> str:
    return _env_str(f"{ENV_PREFIX}ROOT", ".")


def default_mkdirs_exist_ok() -> bool:
    return _env_bool(f"{ENV_PREFIX}MKDIRS_EXIST_OK", False)


def default_log_level() -> str:
    return _env_str(f"{ENV_PREFIX}LOG_LEVEL", "INFO").upper()


def default_log_destination() -> str:
    return _env_str(f"{ENV_PREFIX}LOG_DESTINATION", "stdout")


def default_log_json() -> bool:
    return _env_bool(f"{ENV_PREFIX}LOG_JSON", True)


@dataclass(frozen=True)
class FileSystemConfig:
    """Settings for a sandboxed file system and its logging."""

    root: str = field(default_factory=default_root)
    mkdirs_exist_ok: bool = field(default_factory=default_mkdirs_exist_ok)
    log_level: str = field(default_factory=default_log_level)
    log_destination: str = field(default_factory=default_log_destination)
    log_json: bool = field(default_factory=default_log_json)

    def __post_init__(self) -> None:
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")
        object.__setattr__(self, "log_level", self.log_level.upper())

    @classmethod
    def from_env(cls, **overrides: Any) -> "FileSystemConfig":
        """Read defaults from ``SANDBOX_FS_*`` variables, then apply overrides."""
        return replace(cls(), **overrides)
