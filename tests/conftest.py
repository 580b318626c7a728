"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path
from typing import Any

import pytest
from vfsbuild.filesystem.base import Filesystem
from vfsbuild.filesystem.disk import RootedFilesystem
from vfsbuild.filesystem.memory import MemoryFilesystem
from vfsbuild.models.spec import Dir, File


@pytest.fixture
def memory_fs() -> MemoryFilesystem:
    """Empty in-memory filesystem."""
    return MemoryFilesystem()


@pytest.fixture
def disk_fs(tmp_path: Path) -> RootedFilesystem:
    """Empty real-disk filesystem rooted at a temporary directory."""
    root = tmp_path / "root"
    root.mkdir()
    return RootedFilesystem(root)


@pytest.fixture(params=["memory", "disk"])
def fs(request: pytest.FixtureRequest, tmp_path: Path) -> Filesystem:
    """Empty filesystem, once per backend."""
    if request.param == "memory":
        return MemoryFilesystem()
    root = tmp_path / "root"
    root.mkdir()
    return RootedFilesystem(root)


@pytest.fixture
def home_tree() -> dict[str, Any]:
    """Small home directory specification mixing every raw shape."""
    return {
        "/home/user/.bashrc": "# bashrc\n",
        "/home/user/empty": b"",
        "/home/user/bin/hello.sh": File(perm=0o755, contents=b"echo hello\n"),
        "/home/user/foo": {"bar": {"baz": "qux"}},
        "/root": Dir(perm=0o700, entries={".bashrc": "# root\n"}),
    }
