"""Unit tests for resolution outcomes and build reports."""

from vfsbuild.models.node import DirNode, FileNode, NodeKind
from vfsbuild.models.report import BuildReport, Mutation, Resolution
from vfsbuild.models.spec import DEFAULT_DIR_PERM, DEFAULT_FILE_PERM, Dir, File


class TestMutation:
    """Tests for Mutation dataclass."""

    def test_is_dir(self) -> None:
        """is_dir follows the mutation kind."""
        assert Mutation("/etc", NodeKind.DIRECTORY, 0o755).is_dir
        assert not Mutation("/etc/hosts", NodeKind.FILE, 0o644, 10).is_dir

    def test_size_defaults_to_zero(self) -> None:
        """Directories carry no size."""
        assert Mutation("/etc", NodeKind.DIRECTORY, 0o755).size == 0


class TestBuildReport:
    """Tests for BuildReport dataclass."""

    def test_empty_report(self) -> None:
        """A fresh report has no changes."""
        report = BuildReport()

        assert not report.changed
        assert report.created_paths == []
        assert report.dry_run is False

    def test_created_paths_in_order(self) -> None:
        """created_paths keeps creation order."""
        report = BuildReport(
            mutations=[
                Mutation("/b", NodeKind.DIRECTORY, 0o755),
                Mutation("/a", NodeKind.FILE, 0o644, 1),
            ]
        )

        assert report.changed
        assert report.created_paths == ["/b", "/a"]

    def test_resolution_values(self) -> None:
        """Resolutions serialize as plain strings."""
        assert Resolution.CREATE.value == "create"
        assert Resolution.NOOP == "noop"


class TestDescriptors:
    """Tests for raw File and Dir descriptors and canonical nodes."""

    def test_defaults(self) -> None:
        """Descriptors default to the conventional permissions."""
        assert File().perm == DEFAULT_FILE_PERM == 0o666
        assert File().contents == b""
        assert Dir().perm == DEFAULT_DIR_PERM == 0o777
        assert Dir().entries is None

    def test_node_kinds(self) -> None:
        """Canonical nodes report their kind."""
        assert FileNode(perm=0o644, contents=b"").kind == NodeKind.FILE
        directory = DirNode(perm=0o755)
        assert directory.kind == NodeKind.DIRECTORY
        assert directory.entries == {}
        assert directory.implicit is False
