"""Declarative checks against the observed state of built paths.

Checks are small callables bundled per path with check_path(). Groups of
path checks can be nested in lists and named mappings and evaluated in
one go:

Example:
    >>> failures = run_checks(fs, {
    ...     "home": check_path("/home", is_dir(), mode_perm(0o755)),
    ...     "bashrc": [
    ...         check_path("/home/user/.bashrc", is_regular(), contents("# bashrc\\n")),
    ...     ],
    ... })
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from vfsbuild.filesystem.base import FileInfo, Filesystem
from vfsbuild.utils.formatting import format_perm

# A check returns a failure message, or None when it passes.
Check = Callable[[Filesystem, str, FileInfo | None], str | None]


@dataclass(frozen=True, slots=True)
class CheckFailure:
    """A failed check.

    Attributes:
        name: Slash-joined names of the groups the check was found in.
        path: Checked tree path.
        message: What was observed instead.
    """

    name: str
    path: str
    message: str

    def __str__(self) -> str:
        prefix = f"{self.name}: " if self.name else ""
        return f"{prefix}{self.path}: {self.message}"


@dataclass(frozen=True, slots=True)
class PathCheck:
    """Checks to evaluate against a single path."""

    path: str
    checks: tuple[Check, ...]


def check_path(path: str, *checks: Check) -> PathCheck:
    """Bundle checks for a path."""
    return PathCheck(path=path, checks=checks)


def exists() -> Check:
    def _check(fs: Filesystem, path: str, info: FileInfo | None) -> str | None:
        return "does not exist" if info is None else None

    return _check


def does_not_exist() -> Check:
    def _check(fs: Filesystem, path: str, info: FileInfo | None) -> str | None:
        if info is not None:
            return f"exists as {info.kind.value}"
        return None

    return _check


def is_dir() -> Check:
    def _check(fs: Filesystem, path: str, info: FileInfo | None) -> str | None:
        if info is None:
            return "does not exist"
        if not info.is_dir:
            return f"is a {info.kind.value}, want directory"
        return None

    return _check


def is_regular() -> Check:
    def _check(fs: Filesystem, path: str, info: FileInfo | None) -> str | None:
        if info is None:
            return "does not exist"
        if not info.is_regular:
            return f"is a {info.kind.value}, want regular file"
        return None

    return _check


def mode_perm(perm: int) -> Check:
    def _check(fs: Filesystem, path: str, info: FileInfo | None) -> str | None:
        if info is None:
            return "does not exist"
        if info.perm != perm:
            return f"has permission {format_perm(info.perm)}, want {format_perm(perm)}"
        return None

    return _check


def size(expected: int) -> Check:
    def _check(fs: Filesystem, path: str, info: FileInfo | None) -> str | None:
        if info is None:
            return "does not exist"
        if info.size != expected:
            return f"has size {info.size}, want {expected}"
        return None

    return _check


def min_size(minimum: int) -> Check:
    def _check(fs: Filesystem, path: str, info: FileInfo | None) -> str | None:
        if info is None:
            return "does not exist"
        if info.size < minimum:
            return f"has size {info.size}, want at least {minimum}"
        return None

    return _check


def contents(expected: bytes | str) -> Check:
    """Check exact file contents. Text is compared as UTF-8."""
    want = expected.encode("utf-8") if isinstance(expected, str) else expected

    def _check(fs: Filesystem, path: str, info: FileInfo | None) -> str | None:
        if info is None:
            return "does not exist"
        got = fs.read_file(path)
        if got != want:
            return f"has contents {got!r}, want {want!r}"
        return None

    return _check


def link_count(expected: int) -> Check:
    def _check(fs: Filesystem, path: str, info: FileInfo | None) -> str | None:
        if info is None:
            return "does not exist"
        got = fs.link_count(path)
        if got != expected:
            return f"has {got} links, want {expected}"
        return None

    return _check


def run_checks(fs: Filesystem, tests: Any, name: str = "") -> list[CheckFailure]:
    """Evaluate path checks and collect every failure.

    Args:
        fs: Filesystem to inspect.
        tests: A PathCheck, a list or tuple of tests, or a mapping of
            group name to tests, nested arbitrarily.
        name: Name of the enclosing group.

    Returns:
        List of failures, empty when everything passed.

    Raises:
        TypeError: If tests contains anything else.
    """
    if isinstance(tests, PathCheck):
        info = fs.stat(tests.path)
        failures: list[CheckFailure] = []
        for check in tests.checks:
            message = check(fs, tests.path, info)
            if message is not None:
                failures.append(CheckFailure(name=name, path=tests.path, message=message))
        return failures

    if isinstance(tests, Mapping):
        failures = []
        for key, group in tests.items():
            failures.extend(run_checks(fs, group, f"{name}/{key}" if name else str(key)))
        return failures

    if isinstance(tests, list | tuple):
        failures = []
        for group in tests:
            failures.extend(run_checks(fs, group, name))
        return failures

    msg = f"unsupported test type {type(tests).__name__}"
    raise TypeError(msg)


def assert_checks(fs: Filesystem, tests: Any) -> None:
    """Evaluate path checks and raise if any failed.

    Raises:
        AssertionError: Listing every failure.
    """
    failures = run_checks(fs, tests)
    if failures:
        raise AssertionError("\n".join(str(f) for f in failures))
