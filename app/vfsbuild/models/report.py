"""Resolution outcomes and build reports."""

from dataclasses import dataclass, field
from enum import Enum

from vfsbuild.models.node import NodeKind


class Resolution(str, Enum):
    """Decision taken for a single path.

    Attributes:
        CREATE: The path is missing and will be created.
        NOOP: The path already satisfies the request.
    """

    CREATE = "create"
    NOOP = "noop"


@dataclass(frozen=True, slots=True)
class Mutation:
    """A single entry created (or, in dry-run mode, planned) by a build.

    Attributes:
        path: Absolute tree path.
        kind: Directory or file.
        perm: Effective permission after the umask.
        size: Content size in bytes for files, 0 for directories.
    """

    path: str
    kind: NodeKind
    perm: int
    size: int = 0

    @property
    def is_dir(self) -> bool:
        return self.kind == NodeKind.DIRECTORY


@dataclass(slots=True)
class BuildReport:
    """Mutations performed by one builder operation.

    Attributes:
        mutations: Created entries, in creation order.
        dry_run: Whether the mutations were only planned.
    """

    mutations: list[Mutation] = field(default_factory=list)
    dry_run: bool = False

    @property
    def changed(self) -> bool:
        """Check whether the operation created anything."""
        return bool(self.mutations)

    @property
    def created_paths(self) -> list[str]:
        return [m.path for m in self.mutations]
