"""Explicit entry descriptors for raw tree specifications.

A raw specification is any nesting of:

- a mapping of name to raw value (a directory),
- a str, bytes or bytearray value (a file with default permission),
- a File descriptor (a file with explicit permission),
- a Dir descriptor (a directory with explicit permission and optional entries).

Example:
    >>> tree = {
    ...     "/home/user/.bashrc": "# bashrc\\n",
    ...     "/home/user/bin/hello.sh": File(perm=0o755, contents="echo hello\\n"),
    ...     "/root": Dir(perm=0o700, entries={".bashrc": "# root\\n"}),
    ... }
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from vfsbuild.core.errors import InvalidSpecificationError
from vfsbuild.core.options import parse_perm

# Permissions requested when a raw value does not name one.
DEFAULT_DIR_PERM = 0o777
DEFAULT_FILE_PERM = 0o666


@dataclass(frozen=True, slots=True)
class File:
    """Explicit file descriptor.

    The permission is validated on construction; octal strings such as
    "0644" are accepted and stored as ints.

    Attributes:
        perm: Requested permission bits, before the umask is applied.
        contents: Exact file contents. Text is encoded as UTF-8.
    """

    perm: int = DEFAULT_FILE_PERM
    contents: bytes | str = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "perm", _validate_perm(self.perm))


@dataclass(frozen=True, slots=True)
class Dir:
    """Explicit directory descriptor.

    Attributes:
        perm: Requested permission bits, before the umask is applied.
        entries: Optional mapping of child name to raw value.
    """

    perm: int = DEFAULT_DIR_PERM
    entries: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "perm", _validate_perm(self.perm))


def _validate_perm(perm: Any) -> int:
    try:
        return parse_perm(perm)
    except ValueError as e:
        raise InvalidSpecificationError("", str(e)) from e
