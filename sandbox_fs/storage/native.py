"""Native file system backend confined to a single root directory."""

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Optional, Union

from sandbox_fs.domain.correlation_id import CorrelationLoggerAdapter
from sandbox_fs.domain.errors import (
    IOFailure,
    NotADirectory,
    NotFound,
    PermissionDenied,
)
from sandbox_fs.domain.file_handle import FileHandle
from sandbox_fs.domain.permissions import (
    OWNER_PERMISSIONS,
    TYPE_LETTERS,
    PermissionSet,
)
from sandbox_fs.domain.sandbox import (
    ensure_inside,
    relative_path,
    resolve_sandbox_path,
)
from sandbox_fs.storage.base import FileSystem

STORAGE_LOGGER = CorrelationLoggerAdapter(logging.getLogger("sandbox_fs.storage"), {})

UNKNOWN_IDENTITY = "-"
DIRECTORY_HARD_LINKS = 3
FILE_HARD_LINKS = 1
EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


class SandboxedFileSystem(FileSystem[FileHandle]):
    """Exposes the directory tree under ``root`` and nothing outside it.

    Paths are validated once, when a handle is produced by :meth:`find_file`,
    :meth:`get_parent` or :meth:`list_files`. Every other method trusts the
    handle it receives and delegates to a single native call.
    """

    def __init__(self, root: Union[str, Path], mkdirs_exist_ok: bool = False):
        try:
            canonical_root = Path(root).resolve(strict=True)
        except (OSError, RuntimeError) as exc:
            raise NotADirectory(f"Sandbox root does not exist: {root}") from exc
        if not canonical_root.is_dir():
            raise NotADirectory(f"Sandbox root is not a directory: {root}")

        self._root = canonical_root
        self._mkdirs_exist_ok = mkdirs_exist_ok
        STORAGE_LOGGER.info(
            "Sandbox root configured",
            extra={
                "event": "sandbox_opened",
                "root": canonical_root.as_posix(),
                "mkdirs_exist_ok": mkdirs_exist_ok,
            },
        )

    @property
    def root_path(self) -> Path:
        return self._root

    def _handle(self, path: Path) -> FileHandle:
        return FileHandle(path, self._root)

    def _failure(
        self, operation: str, handle: FileHandle, reason: str, error: OSError
    ) -> IOFailure:
        failure_type = NotFound if isinstance(error, FileNotFoundError) else IOFailure
        STORAGE_LOGGER.warning(
            reason,
            extra={
                "event": f"{operation}_failed",
                "path": self.get_path(handle),
                "error_type": type(error).__name__,
                "errno": error.errno,
                "reason": reason,
            },
        )
        return failure_type.from_os_error(reason, error)

    def get_root(self) -> FileHandle:
        return self._handle(self._root)

    def get_path(self, handle: FileHandle) -> str:
        return relative_path(self._root, handle.path)

    def exists(self, handle: FileHandle) -> bool:
        return handle.path.exists()

    def is_directory(self, handle: FileHandle) -> bool:
        return handle.path.is_dir()

    def get_permissions(self, handle: FileHandle) -> PermissionSet:
        """Return the owner read/write/execute bits; empty for missing files."""
        try:
            mode = handle.path.stat().st_mode
        except OSError:
            return PermissionSet.NONE
        permissions = PermissionSet.NONE
        for _, bit in OWNER_PERMISSIONS:
            if mode & bit:
                permissions |= bit
        return permissions

    def get_size(self, handle: FileHandle) -> int:
        try:
            return handle.path.stat().st_size
        except OSError:
            return 0

    def get_last_modified(self, handle: FileHandle) -> datetime:
        try:
            modified = handle.path.stat().st_mtime
        except OSError:
            return EPOCH
        return datetime.fromtimestamp(modified, tz=timezone.utc)

    def get_hard_links(self, handle: FileHandle) -> int:
        # Real link counts are not reported.
        return DIRECTORY_HARD_LINKS if handle.path.is_dir() else FILE_HARD_LINKS

    def get_name(self, handle: FileHandle) -> str:
        return handle.name

    def get_owner(self, handle: FileHandle) -> str:
        return UNKNOWN_IDENTITY

    def get_group(self, handle: FileHandle) -> str:
        return UNKNOWN_IDENTITY

    def get_parent(self, handle: FileHandle) -> FileHandle:
        if handle.is_root():
            STORAGE_LOGGER.warning(
                "Parent of sandbox root requested",
                extra={"event": "path_forbidden", "path": ""},
            )
            raise PermissionDenied()
        parent = ensure_inside(self._root, handle.path.parent, self.get_path(handle))
        return self._handle(parent)

    def list_files(self, directory: FileHandle) -> list[FileHandle]:
        if not directory.path.is_dir():
            STORAGE_LOGGER.info(
                "Listing requested for non-directory",
                extra={"event": "list_failed", "path": self.get_path(directory)},
            )
            raise NotADirectory()

        try:
            names = [entry.name for entry in os.scandir(directory.path)]
        except OSError as exc:
            raise self._failure(
                "list", directory, "Couldn't list the directory", exc
            ) from exc

        children = []
        for name in names:
            try:
                resolved = resolve_sandbox_path(self._root, name, base=directory.path)
            except PermissionDenied:
                # Links leading out of the sandbox are hidden from listings.
                continue
            children.append(self._handle(resolved))
        return children

    def find_file(self, path: str, base: Optional[FileHandle] = None) -> FileHandle:
        resolved = resolve_sandbox_path(
            self._root, path, base=base.path if base is not None else None
        )
        return self._handle(resolved)

    def read_file(self, handle: FileHandle) -> BinaryIO:
        try:
            stream = open(handle.path, "rb")  # pylint: disable=consider-using-with
        except OSError as exc:
            raise self._failure("read", handle, "Couldn't open the file", exc) from exc
        if STORAGE_LOGGER.logger.isEnabledFor(logging.DEBUG):
            STORAGE_LOGGER.debug(
                "File opened for reading",
                extra={"event": "file_opened_read", "path": self.get_path(handle)},
            )
        return stream

    def write_file(self, handle: FileHandle, append: bool = False) -> BinaryIO:
        mode = "ab" if append else "wb"
        try:
            stream = open(handle.path, mode)  # pylint: disable=consider-using-with
        except OSError as exc:
            raise self._failure("write", handle, "Couldn't open the file", exc) from exc
        if STORAGE_LOGGER.logger.isEnabledFor(logging.DEBUG):
            STORAGE_LOGGER.debug(
                "File opened for writing",
                extra={
                    "event": "file_opened_write",
                    "path": self.get_path(handle),
                    "append": append,
                },
            )
        return stream

    def mkdirs(self, handle: FileHandle) -> None:
        try:
            handle.path.mkdir(parents=True, exist_ok=self._mkdirs_exist_ok)
        except OSError as exc:
            raise self._failure(
                "mkdirs", handle, "Couldn't create the directory", exc
            ) from exc
        STORAGE_LOGGER.info(
            "Directory created",
            extra={"event": "directory_created", "path": self.get_path(handle)},
        )

    def delete(self, handle: FileHandle) -> None:
        try:
            if handle.path.is_dir() and not handle.path.is_symlink():
                handle.path.rmdir()
            else:
                handle.path.unlink()
        except OSError as exc:
            raise self._failure("delete", handle, "Couldn't delete the file", exc) from exc
        STORAGE_LOGGER.info(
            "File deleted",
            extra={"event": "file_deleted", "path": self.get_path(handle)},
        )

    def rename(self, source: FileHandle, target: FileHandle) -> None:
        try:
            source.path.rename(target.path)
        except OSError as exc:
            raise self._failure("rename", source, "Couldn't rename the file", exc) from exc
        STORAGE_LOGGER.info(
            "File renamed",
            extra={
                "event": "file_renamed",
                "path": self.get_path(source),
                "target": self.get_path(target),
            },
        )

    def chmod(self, handle: FileHandle, permissions: PermissionSet) -> None:
        """Apply the owner bits of ``permissions`` one at a time.

        Each bit is a separate native call and earlier successes are kept
        when a later one fails.
        """
        failures: list[tuple[str, OSError]] = []
        for kind, bit in OWNER_PERMISSIONS:
            try:
                mode = handle.path.stat().st_mode & 0o7777
                if permissions & bit:
                    mode |= int(bit)
                else:
                    mode &= ~int(bit)
                os.chmod(handle.path, mode)
            except OSError as exc:
                failures.append((TYPE_LETTERS[kind], exc))

        if failures:
            failed_bits = ", ".join(letter for letter, _ in failures)
            error = failures[0][1]
            raise self._failure(
                "chmod",
                handle,
                f"Couldn't change the permissions ({failed_bits})",
                error,
            ) from error

        STORAGE_LOGGER.info(
            "Permissions changed",
            extra={
                "event": "permissions_changed",
                "path": self.get_path(handle),
                "permissions": permissions.to_mode_string(),
            },
        )
