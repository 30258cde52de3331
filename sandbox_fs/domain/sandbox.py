"""Path resolution and containment checks for the sandbox root."""

import logging
import os
from pathlib import Path
from typing import Optional

from sandbox_fs.domain.correlation_id import CorrelationLoggerAdapter
from sandbox_fs.domain.errors import PermissionDenied

SANDBOX_LOGGER = CorrelationLoggerAdapter(logging.getLogger("sandbox_fs.sandbox"), {})


def canonicalize(path: Path) -> Path:
    """Return the absolute, symlink-resolved, normalized form of ``path``."""
    try:
        return path.resolve()
    except (OSError, RuntimeError, ValueError) as exc:
        # Symlink loops and unreadable components cannot be proven inside the root.
        raise PermissionDenied() from exc


def normalize(path: Path) -> Path:
    """Collapse ``.``, ``..`` and repeated separators without following links."""
    return Path(os.path.normpath(path))


def is_inside(root: Path, candidate: Path) -> bool:
    """Return True when ``candidate`` is ``root`` or lies beneath it.

    ``root`` must already be canonical. The candidate must sit under ``root``
    both as written (after normalization) and once its symbolic links are
    followed.
    """
    candidate = normalize(candidate)
    if candidate == root:
        return True
    if root not in candidate.parents:
        return False
    try:
        target = canonicalize(candidate)
    except PermissionDenied:
        return False
    return target == root or root in target.parents


def ensure_inside(root: Path, candidate: Path, requested: str) -> Path:
    """Return the normalized ``candidate`` or raise when it leaves ``root``."""
    if not is_inside(root, candidate):
        SANDBOX_LOGGER.warning(
            "Path escapes sandbox root",
            extra={"event": "path_forbidden", "path": requested},
        )
        raise PermissionDenied()
    return normalize(candidate)


def _join(base: Path, root: Path, user_path: str) -> Path:
    if user_path.startswith("/"):
        # Client-absolute paths are relative to the sandbox root.
        return root / user_path.lstrip("/")
    return base / user_path


def resolve_sandbox_path(
    root: Path, user_path: str, base: Optional[Path] = None
) -> Path:
    """Resolve a client-supplied path against ``base`` (default ``root``).

    The returned path is normalized but keeps symbolic links as written, so a
    link is addressed as itself rather than as its target.

    Raises:
        PermissionDenied: if the path, as written or with links followed,
            is not ``root`` or inside it.
    """
    if "\x00" in user_path:
        SANDBOX_LOGGER.warning(
            "Path with NUL byte rejected",
            extra={"event": "path_forbidden", "path": repr(user_path)},
        )
        raise PermissionDenied()

    candidate = _join(base if base is not None else root, root, user_path)
    resolved = ensure_inside(root, candidate, user_path)
    if SANDBOX_LOGGER.logger.isEnabledFor(logging.DEBUG):
        SANDBOX_LOGGER.debug(
            "Path resolved",
            extra={
                "event": "path_resolved",
                "path": user_path,
                "resolved": resolved.as_posix(),
            },
        )
    return resolved


def relative_path(root: Path, target: Path) -> str:
    """Return the root-relative, forward-slash form of ``target``."""
    if target == root:
        return ""
    return target.relative_to(root).as_posix()
