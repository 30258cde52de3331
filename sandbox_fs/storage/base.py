"""Abstract file system contract consumed by file-transfer session layers."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import BinaryIO, Generic, Optional, Sequence, TypeVar

from sandbox_fs.domain.permissions import PermissionSet

HandleT = TypeVar("HandleT")


class FileSystem(ABC, Generic[HandleT]):
    """Operations a session layer may run against a storage backend.

    Handle-producing methods validate paths; every other method trusts the
    handle it is given.

    Session layers tag each connection or command by calling
    :func:`sandbox_fs.domain.correlation_id.set_correlation_id` (usually with
    :func:`~sandbox_fs.domain.correlation_id.generate_correlation_id`) before
    invoking operations and :func:`~sandbox_fs.domain.correlation_id.clear_correlation_id`
    afterwards, so backend logs carry the session's correlation id.
    """

    @abstractmethod
    def get_root(self) -> HandleT:
        """Return the handle of the top-level directory."""

    @abstractmethod
    def get_path(self, handle: HandleT) -> str:
        """Return the root-relative path of ``handle``."""

    @abstractmethod
    def exists(self, handle: HandleT) -> bool: ...

    @abstractmethod
    def is_directory(self, handle: HandleT) -> bool: ...

    @abstractmethod
    def get_permissions(self, handle: HandleT) -> PermissionSet: ...

    @abstractmethod
    def get_size(self, handle: HandleT) -> int: ...

    @abstractmethod
    def get_last_modified(self, handle: HandleT) -> datetime: ...

    @abstractmethod
    def get_hard_links(self, handle: HandleT) -> int: ...

    @abstractmethod
    def get_name(self, handle: HandleT) -> str: ...

    @abstractmethod
    def get_owner(self, handle: HandleT) -> str: ...

    @abstractmethod
    def get_group(self, handle: HandleT) -> str: ...

    @abstractmethod
    def get_parent(self, handle: HandleT) -> HandleT:
        """Return the parent directory.

        Raises:
            PermissionDenied: when ``handle`` is the root.
        """

    @abstractmethod
    def list_files(self, directory: HandleT) -> Sequence[HandleT]:
        """Return the children of ``directory``.

        Raises:
            NotADirectory: when ``directory`` is not a directory.
        """

    @abstractmethod
    def find_file(self, path: str, base: Optional[HandleT] = None) -> HandleT:
        """Resolve ``path`` against ``base`` or the root.

        Raises:
            PermissionDenied: when the result would lie outside the root.
        """

    @abstractmethod
    def read_file(self, handle: HandleT) -> BinaryIO:
        """Open ``handle`` for reading. The caller closes the stream."""

    @abstractmethod
    def write_file(self, handle: HandleT, append: bool = False) -> BinaryIO:
        """Open ``handle`` for writing. The caller closes the stream."""

    @abstractmethod
    def mkdirs(self, handle: HandleT) -> None: ...

    @abstractmethod
    def delete(self, handle: HandleT) -> None: ...

    @abstractmethod
    def rename(self, source: HandleT, target: HandleT) -> None: ...

    @abstractmethod
    def chmod(self, handle: HandleT, permissions: PermissionSet) -> None: ...
