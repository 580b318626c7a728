"""Tree materializer.

The Builder walks a canonical tree parent before child and resolves every
path before touching it: missing entries are created, entries that
already match are left alone, and anything else is a conflict. Nothing is
ever overwritten, and nothing is rolled back: the first error aborts the
operation and entries created before it stay in place.

Example:
    >>> builder = Builder(BuilderOptions(umask=0o022))
    >>> report = builder.build(fs, {"/foo": {"bar": "baz"}})
    >>> report.created_paths
    ['/foo', '/foo/bar']
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from rich.markup import escape

from vfsbuild.core.errors import MissingParentError, PathConflictError
from vfsbuild.core.normalizer import normalize
from vfsbuild.core.options import BuilderOptions
from vfsbuild.core.paths import ROOT, ancestors, clean_path, join_path, parent_path
from vfsbuild.core.resolver import resolve_observed
from vfsbuild.filesystem.base import FileInfo, FileKind, Filesystem
from vfsbuild.models.node import DirNode, FileNode, NodeKind
from vfsbuild.models.report import BuildReport, Mutation, Resolution
from vfsbuild.models.spec import DEFAULT_DIR_PERM
from vfsbuild.utils.formatting import err_console, format_perm

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Run:
    """State of a single builder operation.

    Attributes:
        fs: Target filesystem.
        report: Mutations performed so far.
        planned: Entries a dry run would have created, by path.
    """

    fs: Filesystem
    report: BuildReport
    planned: dict[str, FileInfo] = field(default_factory=dict)


class Builder:
    """Materializes tree specifications onto a filesystem.

    A Builder keeps no state between calls; every operation observes the
    filesystem afresh.

    Attributes:
        _options: Build-wide options, fixed for the builder's lifetime.
    """

    def __init__(self, options: BuilderOptions | None = None) -> None:
        """Initialize the Builder.

        Args:
            options: Build-wide options. Defaults to no umask, quiet, not a dry run.
        """
        self._options = options or BuilderOptions()

    @property
    def options(self) -> BuilderOptions:
        return self._options

    def build(self, fs: Filesystem, raw: Any) -> BuildReport:
        """Build a raw tree specification onto a filesystem.

        Siblings are processed in name order, and every directory's whole
        subtree is finished before its next sibling starts.

        Args:
            fs: Target filesystem.
            raw: Raw specification (see vfsbuild.models.spec).

        Returns:
            BuildReport listing the created entries. Empty when the
            filesystem already satisfies the specification.

        Raises:
            InvalidSpecificationError: If the specification is malformed.
            ConflictError: If an existing entry differs from the specification.
            PathConflictError: If a file obstructs a declared directory.
            OSError: If the filesystem fails.
        """
        root = normalize(raw)
        run = self._start(fs)
        if not root.implicit:
            self._mkdir(run, ROOT, root.perm)
        self._walk(run, ROOT, root)
        return run.report

    def mkdir(self, fs: Filesystem, path: str, perm: int) -> Resolution:
        """Create a single directory whose parent already exists.

        Args:
            fs: Target filesystem.
            path: Absolute tree path.
            perm: Requested permission, before the umask.

        Returns:
            Resolution.CREATE if the directory was created, Resolution.NOOP
            if it already existed with the same permission.

        Raises:
            MissingParentError: If the parent does not exist.
            PathConflictError: If the parent is not a directory.
            ConflictError: If the path exists with a different kind or permission.
        """
        return self._mkdir(self._start(fs), clean_path(path), perm)

    def mkdir_all(self, fs: Filesystem, path: str, perm: int) -> BuildReport:
        """Create a directory along with every missing ancestor.

        Existing ancestors are accepted as long as they are directories;
        missing ones are created with perm. The final directory is
        resolved like mkdir.

        Raises:
            PathConflictError: If an ancestor is not a directory. Nothing
                below it is created.
            ConflictError: If the path exists with a different kind or permission.
        """
        path = clean_path(path)
        run = self._start(fs)
        for ancestor in ancestors(path):
            self._ensure_ancestor(run, ancestor, perm)
        self._mkdir(run, path, perm)
        return run.report

    def write_file(
        self, fs: Filesystem, path: str, contents: bytes | None, perm: int
    ) -> Resolution:
        """Create a regular file whose parent already exists.

        Ancestors are never created; use mkdir_all first.

        Args:
            fs: Target filesystem.
            path: Absolute tree path.
            contents: Exact file contents. None means empty.
            perm: Requested permission, before the umask.

        Returns:
            Resolution.CREATE if the file was written, Resolution.NOOP if it
            already existed with the same permission and contents.

        Raises:
            MissingParentError: If the parent does not exist.
            PathConflictError: If a non-directory obstructs the parent path.
            ConflictError: If the path exists with a different kind,
                permission or contents.
        """
        return self._write_file(self._start(fs), clean_path(path), contents or b"", perm)

    def _start(self, fs: Filesystem) -> _Run:
        return _Run(fs=fs, report=BuildReport(dry_run=self._options.dry_run))

    def _walk(self, run: _Run, path: str, directory: DirNode) -> None:
        for name in sorted(directory.entries):
            node = directory.entries[name]
            child_path = join_path(path, name)
            if isinstance(node, FileNode):
                self._write_file(run, child_path, node.contents, node.perm)
                continue
            if node.implicit:
                self._ensure_ancestor(run, child_path, DEFAULT_DIR_PERM)
            else:
                self._mkdir(run, child_path, node.perm)
            self._walk(run, child_path, node)

    def _mkdir(self, run: _Run, path: str, perm: int) -> Resolution:
        if path != ROOT:
            self._require_parent(run, path)
        resolution = resolve_observed(
            run.fs,
            path,
            self._stat(run, path),
            NodeKind.DIRECTORY,
            perm,
            umask=self._options.umask,
        )
        if resolution == Resolution.CREATE:
            self._create(run, path, NodeKind.DIRECTORY, perm)
        return resolution

    def _write_file(self, run: _Run, path: str, contents: bytes, perm: int) -> Resolution:
        if path != ROOT:
            self._require_parent(run, path)
        resolution = resolve_observed(
            run.fs,
            path,
            self._stat(run, path),
            NodeKind.FILE,
            perm,
            contents,
            umask=self._options.umask,
        )
        if resolution == Resolution.CREATE:
            self._create(run, path, NodeKind.FILE, perm, contents)
        return resolution

    def _ensure_ancestor(self, run: _Run, path: str, perm: int) -> None:
        """Create a missing ancestor directory, accept an existing one."""
        info = self._stat(run, path)
        if info is None:
            self._create(run, path, NodeKind.DIRECTORY, perm)
        elif not info.is_dir:
            msg = f"{info.kind.value} is in the way of a directory"
            raise PathConflictError(path, msg)

    def _require_parent(self, run: _Run, path: str) -> None:
        parent = parent_path(path)
        info = self._stat(run, parent)
        if info is not None and info.is_dir:
            return
        if info is not None:
            msg = f"parent {parent} is a {info.kind.value}, not a directory"
            raise PathConflictError(path, msg)

        # A file further up makes the parent unreachable rather than missing.
        for ancestor in ancestors(parent):
            above = self._stat(run, ancestor)
            if above is None:
                break
            if not above.is_dir:
                msg = f"ancestor {ancestor} is a {above.kind.value}, not a directory"
                raise PathConflictError(path, msg)
        msg = f"parent {parent} does not exist"
        raise MissingParentError(path, msg)

    def _stat(self, run: _Run, path: str) -> FileInfo | None:
        planned = run.planned.get(path)
        if planned is not None:
            return planned
        return run.fs.stat(path)

    def _create(
        self,
        run: _Run,
        path: str,
        kind: NodeKind,
        perm: int,
        contents: bytes = b"",
    ) -> None:
        effective = self._options.apply_umask(perm)
        size = len(contents) if kind == NodeKind.FILE else 0

        if self._options.dry_run:
            file_kind = FileKind.DIRECTORY if kind == NodeKind.DIRECTORY else FileKind.REGULAR
            run.planned[path] = FileInfo(path=path, kind=file_kind, perm=effective, size=size)
        elif kind == NodeKind.DIRECTORY:
            run.fs.mkdir(path, effective)
        else:
            run.fs.write_file(path, contents, effective)

        run.report.mutations.append(Mutation(path=path, kind=kind, perm=effective, size=size))
        self._echo(path, kind, effective, size)

    def _echo(self, path: str, kind: NodeKind, perm: int, size: int) -> None:
        verb = "mkdir" if kind == NodeKind.DIRECTORY else "write"
        prefix = "Dry-run: would " if self._options.dry_run else ""
        logger.info("%s%s %s %s", prefix, verb, path, format_perm(perm))
        if not self._options.verbose:
            return
        line = f"[added]{prefix}{verb}[/added] {escape(path)} [muted]{format_perm(perm)}[/muted]"
        if kind == NodeKind.FILE:
            line += f" [muted]{size} bytes[/muted]"
        err_console.print(line, highlight=False)
