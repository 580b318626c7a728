"""Target filesystem backends.

This module provides the Filesystem interface the builder works
against, with an in-memory backend and a real-disk backend rooted at a
host directory. Scratch provisioning lives in vfsbuild.filesystem.tempfs
and path assertions in vfsbuild.filesystem.checks.
"""

from vfsbuild.filesystem.base import FileInfo, FileKind, Filesystem
from vfsbuild.filesystem.disk import RootedFilesystem
from vfsbuild.filesystem.memory import MemoryFilesystem

__all__ = [
    "FileInfo",
    "FileKind",
    "Filesystem",
    "MemoryFilesystem",
    "RootedFilesystem",
]
