"""Shared pytest fixtures for unit and integration tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from sandbox_fs.storage.native import SandboxedFileSystem

PROJECT_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture(name="sandbox_root")
def _sandbox_root(tmp_path: Path) -> Path:
    """Create an empty sandbox directory with a sibling outside it."""

    root = tmp_path / "sandbox"
    root.mkdir()
    (tmp_path / "outside.txt").write_text("secret")
    return root


@pytest.fixture(name="fs")
def _fs(sandbox_root: Path) -> SandboxedFileSystem:
    """Expose a file system confined to ``sandbox_root``."""

    return SandboxedFileSystem(sandbox_root)


@pytest.fixture()
def symlink():
    """Create a symbolic link, skipping when the platform refuses."""

    def _create(link: Path, target: Path) -> Path:
        try:
            os.symlink(target, link, target_is_directory=target.is_dir())
        except (OSError, NotImplementedError) as exc:
            pytest.skip(f"symlinks unsupported: {exc}")
        return link

    return _create
