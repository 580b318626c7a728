"""Unit tests for spec file I/O operations.

Tests for loading, saving and converting TOML spec files.
"""

from pathlib import Path

import pytest
from vfsbuild.core.builder import Builder
from vfsbuild.core.options import BuilderOptions
from vfsbuild.core.specfile import (
    SpecFile,
    SpecFileNotFoundError,
    SpecFileParseError,
    SpecFileValidationError,
    dumps_spec,
    load_spec,
    save_spec,
    spec_from_dict,
    spec_to_dict,
)
from vfsbuild.filesystem.memory import MemoryFilesystem
from vfsbuild.models.spec import Dir, File

SAMPLE_SPEC = """\
[options]
umask = "022"

[tree]
"home/user/.bashrc" = "# bashrc\\n"

[tree.etc]
hostname = "pop-os\\n"

[tree.root]
"$type" = "dir"
perm = "0700"

[tree.root.entries]
".bashrc" = "# root\\n"

[tree.bin]
"$type" = "file"
perm = 493
contents_base64 = "AAEC"
"""


@pytest.fixture
def sample_path(tmp_path: Path) -> Path:
    """Write the sample spec file and return its path."""
    path = tmp_path / "tree.toml"
    path.write_text(SAMPLE_SPEC)
    return path


class TestLoadSpec:
    """Tests for load_spec function."""

    def test_load_sample(self, sample_path: Path) -> None:
        """Options and every kind of tree value are loaded."""
        spec = load_spec(sample_path)

        assert spec.options == BuilderOptions(umask=0o022)
        assert spec.tree["home/user/.bashrc"] == "# bashrc\n"
        assert spec.tree["etc"] == {"hostname": "pop-os\n"}
        assert spec.tree["root"] == Dir(perm=0o700, entries={".bashrc": "# root\n"})
        assert spec.tree["bin"] == File(perm=0o755, contents=b"\x00\x01\x02")

    def test_loaded_tree_builds(self, sample_path: Path) -> None:
        """A loaded spec file is directly buildable."""
        spec = load_spec(sample_path)
        fs = MemoryFilesystem()

        Builder(spec.options).build(fs, spec.tree)

        info = fs.stat("/root/.bashrc")
        assert info is not None and info.perm == 0o644
        assert fs.read_file("/bin") == b"\x00\x01\x02"

    def test_empty_file(self, tmp_path: Path) -> None:
        """An empty spec file describes an empty tree with default options."""
        path = tmp_path / "empty.toml"
        path.write_text("")

        spec = load_spec(path)

        assert spec.options == BuilderOptions()
        assert spec.tree == {}

    def test_not_found(self, tmp_path: Path) -> None:
        """A missing file raises SpecFileNotFoundError."""
        with pytest.raises(SpecFileNotFoundError):
            load_spec(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Broken TOML raises SpecFileParseError."""
        path = tmp_path / "bad.toml"
        path.write_text("[tree\n")

        with pytest.raises(SpecFileParseError):
            load_spec(path)

    @pytest.mark.parametrize(
        ("content", "match"),
        [
            ("[meta]\nname = 'x'\n", "Unknown top-level tables: meta"),
            ("tree = 5\n", r"\[tree\] must be a table"),
            ("[options]\numask = '999'\n", "Invalid options"),
            ("[options]\ncolor = true\n", "Invalid options"),
            ("[tree]\ncount = 5\n", "/count: expected a string or table"),
            ("[tree.a]\n'$type' = 'link'\n", "/a"),
            ("[tree.a]\n'$type' = 'file'\ncontents = 'x'\ncontents_base64 = 'eA=='\n", "only one"),
            ("[tree.a]\n'$type' = 'file'\ncontents_base64 = '***'\n", "invalid contents_base64"),
            ("[tree.a]\n'$type' = 'dir'\nperm = '0800'\n", "/a"),
            ("[tree.a]\n'$type' = 'file'\nperm = ''\ncontents = 'x'\n", "/a"),
            ("[options]\numask = ''\n", "Invalid options"),
        ],
    )
    def test_invalid_content(self, tmp_path: Path, content: str, match: str) -> None:
        """Content that does not describe a tree raises SpecFileValidationError."""
        path = tmp_path / "invalid.toml"
        path.write_text(content)

        with pytest.raises(SpecFileValidationError, match=match):
            load_spec(path)


class TestSaveSpec:
    """Tests for save_spec function."""

    def test_round_trip(self, tmp_path: Path) -> None:
        """Saved spec files load back to the same tree."""
        spec = SpecFile(
            options=BuilderOptions(umask=0o022, verbose=True),
            tree={
                "etc": {"hosts": "127.0.0.1\n"},
                "bin": File(perm=0o755, contents=b"\xff\x00"),
                "motd": File(perm=0o644, contents=b"hello\n"),
                "root": Dir(perm=0o700),
            },
        )

        path = save_spec(spec, tmp_path / "nested" / "tree.toml")
        loaded = load_spec(path)

        assert loaded.options == spec.options
        assert loaded.tree == spec.tree

    def test_no_temporary_files_left(self, tmp_path: Path) -> None:
        """The atomic write leaves only the target file behind."""
        save_spec(SpecFile(), tmp_path / "tree.toml")

        assert [p.name for p in tmp_path.iterdir()] == ["tree.toml"]

    def test_overwrites_existing(self, tmp_path: Path) -> None:
        """Saving replaces an existing file."""
        path = tmp_path / "tree.toml"
        path.write_text("garbage")

        save_spec(SpecFile(tree={"a": "b"}), path)

        assert load_spec(path).tree == {"a": "b"}


class TestConversion:
    """Tests for the dict conversion helpers."""

    def test_dumps_spec(self) -> None:
        """Permissions are rendered as octal strings."""
        spec = SpecFile(options=BuilderOptions(umask=0o022), tree={"d": Dir(perm=0o750)})

        text = dumps_spec(spec)

        assert 'umask = "0022"' in text
        assert 'perm = "0750"' in text
        assert '"$type" = "dir"' in text

    def test_bytes_become_file_tables(self) -> None:
        """Raw bytes are written as file tables with the default permission."""
        expected = {"a": {"$type": "file", "perm": "0666", "contents": "x"}}

        assert spec_to_dict({"a": b"x"}) == expected

    def test_dir_entries_converted(self) -> None:
        """Directory entries are converted recursively."""
        data = spec_to_dict({"d": Dir(perm=0o755, entries={"f": b"\xfe"})})

        assert data == {
            "d": {
                "$type": "dir",
                "perm": "0755",
                "entries": {"f": {"$type": "file", "perm": "0666", "contents_base64": "/g=="}},
            }
        }

    def test_unserializable_value(self) -> None:
        """Values that are not part of a raw specification are rejected."""
        with pytest.raises(SpecFileValidationError, match="cannot serialize int"):
            spec_to_dict({"a": {"b": 42}})

    def test_from_dict_plain_tables(self) -> None:
        """Tables without a type key stay plain mappings."""
        assert spec_from_dict({"a": {"b": "c"}}) == {"a": {"b": "c"}}

    def test_from_dict_blank_perm(self) -> None:
        """A blank permission is rejected instead of building mode 0000."""
        with pytest.raises(SpecFileValidationError, match="/f"):
            spec_from_dict({"f": {"$type": "file", "perm": "", "contents": "x"}})
