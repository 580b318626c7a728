"""Canonical tree nodes produced by the normalizer."""

from dataclasses import dataclass, field
from enum import Enum


class NodeKind(str, Enum):
    """Kind of a canonical tree node.

    Attributes:
        DIRECTORY: Directory node.
        FILE: Regular file node.
    """

    DIRECTORY = "directory"
    FILE = "file"


@dataclass(frozen=True, slots=True)
class FileNode:
    """A regular file in the canonical tree.

    Attributes:
        perm: Requested permission bits, before the umask is applied.
        contents: Exact file contents.
    """

    perm: int
    contents: bytes

    @property
    def kind(self) -> NodeKind:
        return NodeKind.FILE


@dataclass(slots=True)
class DirNode:
    """A directory in the canonical tree.

    Implicit directories are the intermediate components synthesized for
    keys with embedded separators. They follow ancestor rules: created if
    missing, accepted as long as they are directories.

    Attributes:
        perm: Requested permission bits, before the umask is applied.
        entries: Child nodes by name.
        implicit: True for synthesized intermediate directories.
    """

    perm: int
    entries: dict[str, "Node"] = field(default_factory=dict)
    implicit: bool = False

    @property
    def kind(self) -> NodeKind:
        return NodeKind.DIRECTORY


Node = FileNode | DirNode
