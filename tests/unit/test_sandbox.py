"""Tests for sandbox path resolution and containment."""

import logging
from pathlib import Path

import pytest

from sandbox_fs.domain.errors import PermissionDenied
from sandbox_fs.domain.sandbox import is_inside, relative_path, resolve_sandbox_path


@pytest.fixture(name="root")
def root_fixture(sandbox_root: Path) -> Path:
    """Canonical sandbox root."""
    return sandbox_root.resolve()


class TestResolveSandboxPath:
    """Tests for resolve_sandbox_path."""

    def test_valid_relative_path(self, root: Path):
        assert resolve_sandbox_path(root, "notes.txt") == root / "notes.txt"

    def test_deep_subdirectory_path(self, root: Path):
        result = resolve_sandbox_path(root, "a/b/c/d/e/file.md")
        assert result == root / "a" / "b" / "c" / "d" / "e" / "file.md"

    def test_empty_and_dot_resolve_to_root(self, root: Path):
        assert resolve_sandbox_path(root, "") == root
        assert resolve_sandbox_path(root, ".") == root

    def test_leading_slash_is_root_relative(self, root: Path):
        assert resolve_sandbox_path(root, "/docs/a.txt") == root / "docs" / "a.txt"
        assert resolve_sandbox_path(root, "/") == root

    def test_inner_parent_segments_allowed(self, root: Path):
        assert resolve_sandbox_path(root, "a/b/../c.txt") == root / "a" / "c.txt"

    def test_parent_of_root_rejected(self, root: Path):
        with pytest.raises(PermissionDenied):
            resolve_sandbox_path(root, "..")

    def test_path_traversal_rejected(self, root: Path):
        with pytest.raises(PermissionDenied, match="No permission"):
            resolve_sandbox_path(root, "../../etc/passwd")

    def test_nested_path_traversal_rejected(self, root: Path):
        with pytest.raises(PermissionDenied):
            resolve_sandbox_path(root, "sub/../../outside.txt")

    def test_absolute_traversal_rejected(self, root: Path):
        with pytest.raises(PermissionDenied):
            resolve_sandbox_path(root, "/../outside.txt")

    def test_sibling_with_shared_prefix_rejected(self, root: Path):
        sibling = root.parent / (root.name + "-other")
        sibling.mkdir()
        with pytest.raises(PermissionDenied):
            resolve_sandbox_path(root, f"../{sibling.name}/x")

    def test_nul_byte_rejected(self, root: Path):
        with pytest.raises(PermissionDenied):
            resolve_sandbox_path(root, "file\x00.txt")

    def test_symlink_escape_rejected(self, root: Path, symlink):
        symlink(root / "escape", root.parent)
        with pytest.raises(PermissionDenied):
            resolve_sandbox_path(root, "escape/outside.txt")

    def test_symlink_file_escape_rejected(self, root: Path, symlink):
        symlink(root / "leak.txt", root.parent / "outside.txt")
        with pytest.raises(PermissionDenied):
            resolve_sandbox_path(root, "leak.txt")

    def test_symlink_inside_root_keeps_link_path(self, root: Path, symlink):
        (root / "real").mkdir()
        symlink(root / "alias", root / "real")
        assert resolve_sandbox_path(root, "alias/f.txt") == root / "alias" / "f.txt"

    def test_link_from_outside_back_into_root_rejected(self, root: Path, symlink):
        symlink(root.parent / "back", root)
        with pytest.raises(PermissionDenied):
            resolve_sandbox_path(root, "../back/f.txt")

    def test_parent_segment_after_link_is_lexical(self, root: Path, symlink):
        (root / "real" / "deep").mkdir(parents=True)
        symlink(root / "alias", root / "real" / "deep")
        assert resolve_sandbox_path(root, "alias/../x.txt") == root / "x.txt"

    def test_base_relative_resolution(self, root: Path):
        base = root / "dir"
        assert resolve_sandbox_path(root, "f.txt", base=base) == base / "f.txt"
        assert resolve_sandbox_path(root, "..", base=base) == root

    def test_base_relative_escape_rejected(self, root: Path):
        with pytest.raises(PermissionDenied):
            resolve_sandbox_path(root, "../..", base=root / "dir")

    def test_absolute_path_ignores_base(self, root: Path):
        base = root / "dir"
        assert resolve_sandbox_path(root, "/top.txt", base=base) == root / "top.txt"

    def test_forbidden_path_is_logged(self, root: Path, caplog):
        with caplog.at_level(logging.WARNING, logger="sandbox_fs"):
            with pytest.raises(PermissionDenied):
                resolve_sandbox_path(root, "../x")
        events = [getattr(record, "event", None) for record in caplog.records]
        assert "path_forbidden" in events


def test_is_inside_accepts_root_itself(sandbox_root: Path):
    root = sandbox_root.resolve()
    assert is_inside(root, root)
    assert is_inside(root, root / "child")
    assert not is_inside(root, root / "..")


def test_relative_path_uses_forward_slashes(sandbox_root: Path):
    root = sandbox_root.resolve()
    assert relative_path(root, root) == ""
    assert relative_path(root, root / "a" / "b.txt") == "a/b.txt"
