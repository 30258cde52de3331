"""Bit-mapped permission sets shared by every file system backend.

Bits are laid out like Unix mode bits: a permission's bit index is the sum of
its category offset and its type offset, so ``OWNER_READ`` is ``0o400``.
"""

import enum

CAT_OWNER = 6
CAT_GROUP = 3
CAT_OTHER = 0

TYPE_READ = 2
TYPE_WRITE = 1
TYPE_EXECUTE = 0

CATEGORIES = (CAT_OWNER, CAT_GROUP, CAT_OTHER)
TYPES = (TYPE_READ, TYPE_WRITE, TYPE_EXECUTE)
TYPE_LETTERS = {TYPE_READ: "r", TYPE_WRITE: "w", TYPE_EXECUTE: "x"}


class PermissionSet(enum.IntFlag):
    """Read/write/execute capabilities per category."""

    NONE = 0
    OTHER_EXECUTE = 1 << (CAT_OTHER + TYPE_EXECUTE)
    OTHER_WRITE = 1 << (CAT_OTHER + TYPE_WRITE)
    OTHER_READ = 1 << (CAT_OTHER + TYPE_READ)
    GROUP_EXECUTE = 1 << (CAT_GROUP + TYPE_EXECUTE)
    GROUP_WRITE = 1 << (CAT_GROUP + TYPE_WRITE)
    GROUP_READ = 1 << (CAT_GROUP + TYPE_READ)
    OWNER_EXECUTE = 1 << (CAT_OWNER + TYPE_EXECUTE)
    OWNER_WRITE = 1 << (CAT_OWNER + TYPE_WRITE)
    OWNER_READ = 1 << (CAT_OWNER + TYPE_READ)

    @classmethod
    def from_mode(cls, mode: int) -> "PermissionSet":
        """Build a set from the permission bits of a native ``st_mode``."""
        return cls(mode & 0o777)

    def has(self, category: int, kind: int) -> bool:
        return bool(self & permission_bit(category, kind))

    def with_permission(self, category: int, kind: int, enabled: bool) -> "PermissionSet":
        """Return a copy with one permission set or cleared."""
        bit = permission_bit(category, kind)
        if enabled:
            return PermissionSet(self | bit)
        return PermissionSet(self & ~bit & 0o777)

    def to_mode_string(self, is_directory: bool = False) -> str:
        """Render as an ``ls -l`` mode column, e.g. ``drwxr-x---``."""
        letters = ["d" if is_directory else "-"]
        for category in CATEGORIES:
            for kind in TYPES:
                letters.append(TYPE_LETTERS[kind] if self.has(category, kind) else "-")
        return "".join(letters)


def permission_bit(category: int, kind: int) -> PermissionSet:
    """Return the single-bit set for ``category`` x ``kind``."""
    return PermissionSet(1 << (category + kind))


OWNER_PERMISSIONS = (
    (TYPE_READ, PermissionSet.OWNER_READ),
    (TYPE_WRITE, PermissionSet.OWNER_WRITE),
    (TYPE_EXECUTE, PermissionSet.OWNER_EXECUTE),
)
