"""In-memory filesystem backend.

Keeps the whole tree in a dictionary keyed by absolute path. Useful for
tests and for planning builds without touching the disk.
"""

import errno
import os
from dataclasses import dataclass

from vfsbuild.core.paths import ROOT, clean_path, parent_path
from vfsbuild.filesystem.base import FileInfo, FileKind, Filesystem


@dataclass(slots=True)
class _Entry:
    kind: FileKind
    perm: int
    contents: bytes = b""
    target: str | None = None


def _error(exc_type: type[OSError], code: int, path: str) -> OSError:
    return exc_type(code, os.strerror(code), path)


class MemoryFilesystem(Filesystem):
    """Filesystem held entirely in memory.

    The root directory always exists. Creation is single-level: a missing
    parent raises FileNotFoundError, a non-directory parent raises
    NotADirectoryError, exactly as the host OS would.

    Beyond the Filesystem interface, symlink() and chmod() let callers
    stage entries of kind OTHER and permission drift that the builder
    itself never produces, so conflict handling can be exercised without
    touching the disk.

    Attributes:
        _entries: Entries by absolute path.
    """

    def __init__(self, root_perm: int = 0o755) -> None:
        """Initialize an empty filesystem.

        Args:
            root_perm: Permission reported for the root directory.
        """
        self._entries: dict[str, _Entry] = {ROOT: _Entry(FileKind.DIRECTORY, root_perm)}

    def stat(self, path: str) -> FileInfo | None:
        key = clean_path(path)
        entry = self._entries.get(key)
        if entry is None:
            return None
        return FileInfo(path=key, kind=entry.kind, perm=entry.perm, size=self._size(entry))

    def read_file(self, path: str) -> bytes:
        key = clean_path(path)
        entry = self._entries.get(key)
        if entry is None:
            raise _error(FileNotFoundError, errno.ENOENT, key)
        if entry.kind == FileKind.DIRECTORY:
            raise _error(IsADirectoryError, errno.EISDIR, key)
        return entry.contents

    def mkdir(self, path: str, perm: int) -> None:
        key = self._check_create(path)
        self._entries[key] = _Entry(FileKind.DIRECTORY, perm)

    def write_file(self, path: str, contents: bytes, perm: int) -> None:
        key = clean_path(path)
        entry = self._entries.get(key)
        if entry is not None:
            if entry.kind == FileKind.DIRECTORY:
                raise _error(IsADirectoryError, errno.EISDIR, key)
            # Overwrites keep the existing permission, like open(2).
            entry.contents = bytes(contents)
            return
        self._check_parent(key)
        self._entries[key] = _Entry(FileKind.REGULAR, perm, bytes(contents))

    def list_dir(self, path: str) -> list[str]:
        key = clean_path(path)
        entry = self._entries.get(key)
        if entry is None:
            raise _error(FileNotFoundError, errno.ENOENT, key)
        if entry.kind != FileKind.DIRECTORY:
            raise _error(NotADirectoryError, errno.ENOTDIR, key)
        return sorted(
            p.rsplit("/", 1)[1] for p in self._entries if p != ROOT and parent_path(p) == key
        )

    def link_count(self, path: str) -> int:
        key = clean_path(path)
        entry = self._entries.get(key)
        if entry is None:
            raise _error(FileNotFoundError, errno.ENOENT, key)
        if entry.kind != FileKind.DIRECTORY:
            return 1
        subdirs = [
            name
            for name in self.list_dir(key)
            if self._entries[clean_path(f"{key}/{name}")].kind == FileKind.DIRECTORY
        ]
        return 2 + len(subdirs)

    def symlink(self, target: str, path: str) -> None:
        """Create a symbolic link entry, reported with kind OTHER."""
        key = self._check_create(path)
        self._entries[key] = _Entry(FileKind.OTHER, 0o777, target=target)

    def chmod(self, path: str, perm: int) -> None:
        """Change the permission of an existing entry."""
        key = clean_path(path)
        entry = self._entries.get(key)
        if entry is None:
            raise _error(FileNotFoundError, errno.ENOENT, key)
        entry.perm = perm

    def _check_create(self, path: str) -> str:
        key = clean_path(path)
        if key in self._entries:
            raise _error(FileExistsError, errno.EEXIST, key)
        self._check_parent(key)
        return key

    def _check_parent(self, key: str) -> None:
        parent = self._entries.get(parent_path(key))
        if parent is None:
            raise _error(FileNotFoundError, errno.ENOENT, key)
        if parent.kind != FileKind.DIRECTORY:
            raise _error(NotADirectoryError, errno.ENOTDIR, key)

    @staticmethod
    def _size(entry: _Entry) -> int:
        if entry.kind == FileKind.REGULAR:
            return len(entry.contents)
        if entry.kind == FileKind.OTHER and entry.target is not None:
            return len(entry.target)
        return 0
