"""Unit tests for scratch filesystems."""

import os
import tempfile
from pathlib import Path

import pytest
from vfsbuild.core.errors import InvalidSpecificationError
from vfsbuild.core.options import BuilderOptions
from vfsbuild.filesystem.tempfs import TEMP_PREFIX, temp_filesystem


@pytest.fixture
def scratch_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect scratch directories below tmp_path."""
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    return tmp_path


class TestTempFilesystem:
    """Tests for temp_filesystem context manager."""

    def test_builds_and_removes(self, scratch_dir: Path) -> None:
        """The tree is built on entry and removed on exit."""
        with temp_filesystem({"/etc/hostname": "pop-os\n"}) as fs:
            root = fs.root
            assert root.parent == scratch_dir
            assert root.name.startswith(TEMP_PREFIX)
            assert fs.read_file("/etc/hostname") == b"pop-os\n"

        assert not root.exists()

    def test_empty(self, scratch_dir: Path) -> None:
        """Without a specification the scratch root is empty."""
        with temp_filesystem() as fs:
            assert fs.list_dir("/") == []

        assert list(scratch_dir.iterdir()) == []

    def test_options_applied(self, scratch_dir: Path) -> None:
        """Builder options are used for the initial build."""
        with temp_filesystem({"a": "b"}, BuilderOptions(umask=0o077)) as fs:
            info = fs.stat("/a")
            assert info is not None and info.perm == 0o600

    def test_removed_after_failed_build(self, scratch_dir: Path) -> None:
        """A failing initial build still removes the directory."""
        with pytest.raises(InvalidSpecificationError):
            with temp_filesystem({"a": 42}):
                pytest.fail("body must not run")

        assert list(scratch_dir.iterdir()) == []

    def test_removed_after_error_in_body(self, scratch_dir: Path) -> None:
        """Errors raised inside the block propagate after cleanup."""
        with pytest.raises(RuntimeError):
            with temp_filesystem({"a": "b"}):
                raise RuntimeError("boom")

        assert list(scratch_dir.iterdir()) == []

    def test_removes_read_only_directories(self, scratch_dir: Path) -> None:
        """Directories without write permission are removed too."""
        with temp_filesystem({"/locked/file": "x"}) as fs:
            os.chmod(fs.real_path("/locked"), 0o500)

        assert list(scratch_dir.iterdir()) == []
