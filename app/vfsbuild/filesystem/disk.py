"""Real-disk filesystem backend rooted at a host directory.

Every absolute tree path is resolved below the root directory, so a tree
path "/etc/hosts" with root "/tmp/x" maps to "/tmp/x/etc/hosts".
"""

import os
import stat
from pathlib import Path

from vfsbuild.core.paths import clean_path
from vfsbuild.filesystem.base import FileInfo, FileKind, Filesystem


class RootedFilesystem(Filesystem):
    """Filesystem backed by a host directory.

    Permissions are applied with an explicit chmod after creation, so the
    process umask never changes what ends up on disk. Entries are
    inspected with lstat: symbolic links are reported as OTHER and never
    followed. Only the final component is inspected that way: a symlink
    in an intermediate component is resolved by the host, so a path below
    a linked directory may point outside root. OS errors propagate unchanged.

    Attributes:
        root: Host directory that tree path "/" maps to.
    """

    def __init__(self, root: Path | str) -> None:
        """Initialize the filesystem.

        Args:
            root: Existing host directory used as the tree root.

        Raises:
            NotADirectoryError: If root is not an existing directory.
        """
        self.root = Path(root)
        if not self.root.is_dir():
            msg = f"Filesystem root is not a directory: {self.root}"
            raise NotADirectoryError(msg)

    def real_path(self, path: str) -> Path:
        """Return the host path for a tree path."""
        return self.root.joinpath(clean_path(path).lstrip("/"))

    def stat(self, path: str) -> FileInfo | None:
        try:
            st = os.lstat(self.real_path(path))
        except (FileNotFoundError, NotADirectoryError):
            return None

        if stat.S_ISDIR(st.st_mode):
            kind = FileKind.DIRECTORY
        elif stat.S_ISREG(st.st_mode):
            kind = FileKind.REGULAR
        else:
            kind = FileKind.OTHER
        return FileInfo(
            path=clean_path(path),
            kind=kind,
            perm=stat.S_IMODE(st.st_mode) & 0o777,
            size=st.st_size,
        )

    def read_file(self, path: str) -> bytes:
        return self.real_path(path).read_bytes()

    def mkdir(self, path: str, perm: int) -> None:
        target = self.real_path(path)
        os.mkdir(target, perm)
        os.chmod(target, perm)

    def write_file(self, path: str, contents: bytes, perm: int) -> None:
        target = self.real_path(path)
        existed = os.path.lexists(target)
        with open(target, "wb") as f:
            f.write(contents)
        # Overwrites keep the existing permission, like open(2).
        if not existed:
            os.chmod(target, perm)

    def list_dir(self, path: str) -> list[str]:
        return sorted(os.listdir(self.real_path(path)))

    def link_count(self, path: str) -> int:
        return os.lstat(self.real_path(path)).st_nlink
