"""Unit tests for snapshot capture."""

import logging
from typing import Any

import pytest
from vfsbuild.core.builder import Builder
from vfsbuild.core.options import BuilderOptions
from vfsbuild.core.snapshot import snapshot
from vfsbuild.filesystem.base import Filesystem
from vfsbuild.filesystem.memory import MemoryFilesystem
from vfsbuild.models.spec import Dir, File


class TestSnapshot:
    """Tests for snapshot function."""

    def test_empty_tree(self, fs: Filesystem) -> None:
        """An empty root captures as an empty mapping."""
        assert snapshot(fs) == {}

    def test_captures_observed_state(self, fs: Filesystem, home_tree: dict[str, Any]) -> None:
        """Entries are recorded with their permission after the umask."""
        Builder(BuilderOptions(umask=0o022)).build(fs, home_tree)

        result = snapshot(fs)

        assert sorted(result) == ["home", "root"]
        assert result["root"] == Dir(
            perm=0o700, entries={".bashrc": File(perm=0o644, contents=b"# root\n")}
        )
        home = result["home"]
        assert isinstance(home, Dir)
        assert home.perm == 0o755
        user = home.entries["user"]
        assert user.entries["bin"] == Dir(
            perm=0o755, entries={"hello.sh": File(perm=0o755, contents=b"echo hello\n")}
        )
        assert user.entries["empty"] == File(perm=0o644, contents=b"")

    def test_subdirectory(self, fs: Filesystem) -> None:
        """A snapshot can start below the root."""
        Builder().build(fs, {"/etc/hosts": "127.0.0.1\n"})

        assert snapshot(fs, "/etc") == {"hosts": File(perm=0o666, contents=b"127.0.0.1\n")}

    def test_rebuild_is_noop(self, fs: Filesystem, home_tree: dict[str, Any]) -> None:
        """Building a snapshot onto its source with no umask changes nothing."""
        Builder(BuilderOptions(umask=0o022)).build(fs, home_tree)

        report = Builder(BuilderOptions(umask=0)).build(fs, snapshot(fs))

        assert report.mutations == []

    def test_reproduces_tree_elsewhere(self, home_tree: dict[str, Any]) -> None:
        """Building a snapshot onto an empty filesystem reproduces the tree."""
        source = MemoryFilesystem()
        Builder(BuilderOptions(umask=0o027)).build(source, home_tree)
        captured = snapshot(source)

        copy = MemoryFilesystem()
        Builder().build(copy, captured)

        assert snapshot(copy) == captured

    def test_skips_other_entries(self, caplog: pytest.LogCaptureFixture) -> None:
        """Symbolic links are left out with a warning."""
        fs = MemoryFilesystem()
        fs.write_file("/target", b"x", 0o644)
        fs.symlink("/target", "/link")

        with caplog.at_level(logging.WARNING, logger="vfsbuild.core.snapshot"):
            result = snapshot(fs)

        assert list(result) == ["target"]
        assert "Skipping /link" in caplog.text

    def test_not_a_directory(self, fs: Filesystem) -> None:
        """Snapshotting a file is an error."""
        fs.write_file("/file", b"", 0o644)

        with pytest.raises(NotADirectoryError):
            snapshot(fs, "/file")

    def test_missing_directory(self, fs: Filesystem) -> None:
        """Snapshotting a missing path is an error."""
        with pytest.raises(FileNotFoundError):
            snapshot(fs, "/missing")
