"""Capture an existing tree as a raw specification.

snapshot() is the inverse of a build: building its result with a zero
umask onto the tree it was taken from performs no mutations.
"""

import logging

from vfsbuild.core.paths import clean_path, join_path
from vfsbuild.filesystem.base import FileKind, Filesystem
from vfsbuild.models.spec import Dir, File

logger = logging.getLogger(__name__)


def snapshot(fs: Filesystem, path: str = "/") -> dict[str, File | Dir]:
    """Describe the entries of a directory as explicit descriptors.

    Permissions are recorded as observed, so they round-trip with a zero
    umask. Entries that are neither directories nor regular files are
    skipped.

    Args:
        fs: Filesystem to inspect.
        path: Directory whose entries to capture.

    Returns:
        Mapping of entry name to File or Dir descriptor.

    Raises:
        NotADirectoryError: If path is not a directory.
        FileNotFoundError: If path does not exist.
    """
    path = clean_path(path)
    entries: dict[str, File | Dir] = {}

    for name in fs.list_dir(path):
        child_path = join_path(path, name)
        info = fs.stat(child_path)
        if info is None:
            # Removed while we were looking.
            continue
        if info.kind == FileKind.DIRECTORY:
            entries[name] = Dir(perm=info.perm, entries=snapshot(fs, child_path))
        elif info.kind == FileKind.REGULAR:
            entries[name] = File(perm=info.perm, contents=fs.read_file(child_path))
        else:
            logger.warning("Skipping %s: not a directory or regular file", child_path)

    return entries
