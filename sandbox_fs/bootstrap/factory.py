"""Wire configuration, logging and the native backend together."""

import logging
from typing import Optional

from sandbox_fs.bootstrap.config import FileSystemConfig
from sandbox_fs.bootstrap.logging_setup import configure_logging
from sandbox_fs.domain.correlation_id import CorrelationLoggerAdapter
from sandbox_fs.storage.native import SandboxedFileSystem

BOOTSTRAP_LOGGER = CorrelationLoggerAdapter(logging.getLogger("sandbox_fs.bootstrap"), {})


def create_file_system(
    config: Optional[FileSystemConfig] = None, configure: bool = True
) -> SandboxedFileSystem:
    """Build a :class:`SandboxedFileSystem` from ``config``.

    Logging is configured first when ``configure`` is true so that the
    sandbox_opened event reaches the configured destination.
    """
    if config is None:
        config = FileSystemConfig.from_env()
    if configure:
        configure_logging(config.log_level, config.log_destination, config.log_json)
    BOOTSTRAP_LOGGER.info(
        "Creating sandboxed file system",
        extra={
            "event": "file_system_starting",
            "directory": config.root,
            "log_level": config.log_level,
            "log_destination": config.log_destination,
        },
    )
    return SandboxedFileSystem(config.root, mkdirs_exist_ok=config.mkdirs_exist_ok)
