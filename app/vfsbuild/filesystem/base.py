"""Abstract base class for target filesystems.

This module defines the narrow capability interface the builder needs
from a storage backend. Backends report their own failures as OSError
subclasses; the builder passes those through unchanged.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class FileKind(str, Enum):
    """Observed kind of an existing entry.

    Attributes:
        DIRECTORY: Directory.
        REGULAR: Regular file.
        OTHER: Anything else (symlink, device, socket, fifo).
    """

    DIRECTORY = "directory"
    REGULAR = "regular"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class FileInfo:
    """Observed state of an existing entry.

    Attributes:
        path: Absolute tree path.
        kind: Entry kind.
        perm: Effective permission bits (0-0777).
        size: Size in bytes.
    """

    path: str
    kind: FileKind
    perm: int
    size: int

    @property
    def is_dir(self) -> bool:
        return self.kind == FileKind.DIRECTORY

    @property
    def is_regular(self) -> bool:
        return self.kind == FileKind.REGULAR


class Filesystem(ABC):
    """Abstract base class for all target filesystems.

    Paths are absolute, slash-delimited tree paths.

    Example:
        >>> fs = MemoryFilesystem()
        >>> fs.mkdir("/etc", 0o755)
        >>> fs.write_file("/etc/hostname", b"pop-os\\n", 0o644)
        >>> fs.stat("/etc/hostname").size
        7
    """

    @abstractmethod
    def stat(self, path: str) -> FileInfo | None:
        """Return the observed state of a path.

        Returns:
            FileInfo for an existing path, None if nothing exists there.
        """

    @abstractmethod
    def read_file(self, path: str) -> bytes:
        """Read the full contents of a regular file.

        Raises:
            FileNotFoundError: If the path does not exist.
            IsADirectoryError: If the path is a directory.
        """

    @abstractmethod
    def mkdir(self, path: str, perm: int) -> None:
        """Create a single directory with exactly the given permission.

        Raises:
            FileNotFoundError: If the parent does not exist.
            NotADirectoryError: If the parent is not a directory.
            FileExistsError: If the path already exists.
        """

    @abstractmethod
    def write_file(self, path: str, contents: bytes, perm: int) -> None:
        """Create a regular file with exactly the given contents and permission.

        Raises:
            FileNotFoundError: If the parent does not exist.
            NotADirectoryError: If the parent is not a directory.
        """

    @abstractmethod
    def list_dir(self, path: str) -> list[str]:
        """Return the sorted names of a directory's entries.

        Raises:
            FileNotFoundError: If the path does not exist.
            NotADirectoryError: If the path is not a directory.
        """

    def link_count(self, path: str) -> int:
        """Return the hard-link count of a path.

        Backends without hard-link semantics report 1 for any existing path.

        Raises:
            FileNotFoundError: If the path does not exist.
        """
        if self.stat(path) is None:
            raise FileNotFoundError(path)
        return 1
