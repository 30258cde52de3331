"""Opaque handles to resolved locations inside a sandbox."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class FileHandle:
    """A normalized native path known to lie inside its owning sandbox.

    Symbolic links stay in the path as written; only the containment check
    follows them.

    Handles are produced by the resolver or by directory listing. They say
    nothing about existence; ask the file system for that.
    """

    path: Path
    root: Path = field(repr=False)

    @property
    def name(self) -> str:
        return self.path.name

    def is_root(self) -> bool:
        return self.path == self.root
