"""Scratch filesystems for tests and previews.

temp_filesystem() provisions an isolated, writable host directory, builds
a specification into it, and removes the directory again on every exit
path, including a failed build.
"""

import logging
import os
import shutil
import stat
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from vfsbuild.core.builder import Builder
from vfsbuild.core.options import BuilderOptions
from vfsbuild.filesystem.disk import RootedFilesystem

logger = logging.getLogger(__name__)

TEMP_PREFIX = "vfsbuild-"


@contextmanager
def temp_filesystem(
    raw: Any = None,
    options: BuilderOptions | None = None,
) -> Iterator[RootedFilesystem]:
    """Provision a scratch directory and build a specification into it.

    Example:
        >>> with temp_filesystem({"/etc/hostname": "pop-os\\n"}) as fs:
        ...     fs.read_file("/etc/hostname")
        b'pop-os\\n'

    Args:
        raw: Raw specification to build, or None for an empty tree.
        options: Builder options used for the initial build.

    Yields:
        RootedFilesystem rooted at the scratch directory.

    Raises:
        BuildError: If the initial build fails. The directory is removed first.
        OSError: If the scratch directory cannot be created or written.
    """
    root = Path(tempfile.mkdtemp(prefix=TEMP_PREFIX))
    logger.debug("Created scratch root %s", root)
    try:
        fs = RootedFilesystem(root)
        if raw is not None:
            Builder(options).build(fs, raw)
        yield fs
    finally:
        _remove_tree(root)


def _remove_tree(root: Path) -> None:
    """Remove a scratch directory, including read-only subdirectories."""
    # Directories must be listable and writable before their entries can go.
    os.chmod(root, stat.S_IRWXU)
    for dirpath, dirnames, _ in os.walk(root):
        for name in dirnames:
            path = os.path.join(dirpath, name)
            if not os.path.islink(path):
                os.chmod(path, stat.S_IRWXU)
    shutil.rmtree(root)
    logger.debug("Removed scratch root %s", root)
