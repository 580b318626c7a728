"""Conflict and idempotency resolution.

Decides, for a single path, whether the requested entry must be created,
is already satisfied, or conflicts with what exists. The decision is made
in this order:

1. Nothing exists at the path: CREATE.
2. The existing kind differs from the requested kind: TypeConflictError.
3. The effective permission differs: AttributeConflictError.
4. For files, the contents differ: AttributeConflictError.
5. Otherwise: NOOP.

The umask is applied to the requested permission both when creating and
when comparing, so a tree built with one umask is verified with the same
effective permissions by a later build using that umask.
"""

import logging

from vfsbuild.core.errors import AttributeConflictError, TypeConflictError
from vfsbuild.core.options import MAX_PERM
from vfsbuild.filesystem.base import FileInfo, FileKind, Filesystem
from vfsbuild.models.node import NodeKind
from vfsbuild.models.report import Resolution

logger = logging.getLogger(__name__)

_EXPECTED_KIND = {
    NodeKind.DIRECTORY: FileKind.DIRECTORY,
    NodeKind.FILE: FileKind.REGULAR,
}


def resolve(
    fs: Filesystem,
    path: str,
    kind: NodeKind,
    perm: int,
    contents: bytes | None = None,
    umask: int = 0,
) -> Resolution:
    """Resolve the requested entry against the current state of a path.

    Args:
        fs: Target filesystem.
        path: Absolute tree path.
        kind: Requested node kind.
        perm: Requested permission, before the umask.
        contents: Requested contents, for files.
        umask: Bits removed from perm.

    Returns:
        Resolution.CREATE if the path is missing, Resolution.NOOP if it
        already satisfies the request.

    Raises:
        TypeConflictError: If the existing entry has the wrong kind.
        AttributeConflictError: If the existing entry has the wrong
            permission or contents.
        OSError: If the filesystem cannot be inspected.
    """
    return resolve_observed(fs, path, fs.stat(path), kind, perm, contents, umask)


def resolve_observed(
    fs: Filesystem,
    path: str,
    info: FileInfo | None,
    kind: NodeKind,
    perm: int,
    contents: bytes | None = None,
    umask: int = 0,
) -> Resolution:
    """Resolve the requested entry against an already observed state.

    Same decision as resolve(), for callers that have stat'ed the path
    themselves. fs is only read when file contents must be compared.

    Returns:
        Resolution.CREATE if the path is missing, Resolution.NOOP if it
        already satisfies the request.

    Raises:
        TypeConflictError: If the existing entry has the wrong kind.
        AttributeConflictError: If the existing entry has the wrong
            permission or contents.
        OSError: If the filesystem cannot be read.
    """
    if info is None:
        logger.debug("resolve %s: missing, create", path)
        return Resolution.CREATE

    expected = _EXPECTED_KIND[kind]
    if info.kind != expected:
        msg = f"exists as {info.kind.value}, want {expected.value}"
        raise TypeConflictError(path, msg)

    want_perm = perm & ~umask & MAX_PERM
    if info.perm != want_perm:
        msg = f"has permission {info.perm:04o}, want {want_perm:04o}"
        raise AttributeConflictError(path, msg)

    if kind == NodeKind.FILE:
        want = contents or b""
        # Size first, so large mismatching files are never read.
        if info.size != len(want) or fs.read_file(path) != want:
            msg = f"has different contents ({info.size} bytes, want {len(want)} bytes)"
            raise AttributeConflictError(path, msg)

    logger.debug("resolve %s: already satisfied", path)
    return Resolution.NOOP
