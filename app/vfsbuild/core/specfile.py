"""Spec file I/O operations.

This module provides functions for loading and saving tree
specifications in TOML format. A spec file has an optional [options]
table validated into BuilderOptions and a [tree] table holding the raw
specification:

    [options]
    umask = "022"

    [tree]
    "home/user/.bashrc" = "# bashrc\\n"

    [tree.root]
    "$type" = "dir"
    perm = "0700"

    [tree.root.entries]
    ".bashrc" = "# root\\n"

Tables with a "$type" key ("file" or "dir") are explicit descriptors,
other tables are nested directories, strings are file contents.
"""

import base64
import binascii
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any, Literal

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from vfsbuild.core.options import BuilderOptions, parse_perm
from vfsbuild.models.spec import DEFAULT_DIR_PERM, DEFAULT_FILE_PERM, Dir, File
from vfsbuild.utils.formatting import format_perm

TYPE_KEY = "$type"


class SpecFileError(Exception):
    """Base exception for spec file errors."""


class SpecFileNotFoundError(SpecFileError):
    """Raised when a spec file is not found."""


class SpecFileParseError(SpecFileError):
    """Raised when a spec file is not valid TOML."""


class SpecFileValidationError(SpecFileError):
    """Raised when spec file content does not describe a valid tree."""


class FileEntry(BaseModel):
    """Explicit file table in a spec file."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    type: Annotated[Literal["file"], Field(alias=TYPE_KEY)]
    perm: Annotated[int, Field(description="Permission before umask")] = DEFAULT_FILE_PERM
    contents: Annotated[str | None, Field(description="UTF-8 file contents")] = None
    contents_base64: Annotated[str | None, Field(description="Base64 file contents")] = None

    @field_validator("perm", mode="before")
    @classmethod
    def validate_perm(cls, v: object) -> int:
        return parse_perm(v)

    def to_descriptor(self) -> File:
        if self.contents is not None and self.contents_base64 is not None:
            msg = "only one of contents and contents_base64 may be set"
            raise ValueError(msg)
        if self.contents_base64 is not None:
            try:
                data = base64.b64decode(self.contents_base64, validate=True)
            except binascii.Error as e:
                msg = f"invalid contents_base64: {e}"
                raise ValueError(msg) from e
            return File(perm=self.perm, contents=data)
        return File(perm=self.perm, contents=(self.contents or "").encode("utf-8"))


class DirEntry(BaseModel):
    """Explicit directory table in a spec file."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    type: Annotated[Literal["dir"], Field(alias=TYPE_KEY)]
    perm: Annotated[int, Field(description="Permission before umask")] = DEFAULT_DIR_PERM
    entries: Annotated[dict[str, Any] | None, Field(description="Child entries")] = None

    @field_validator("perm", mode="before")
    @classmethod
    def validate_perm(cls, v: object) -> int:
        return parse_perm(v)


class SpecFile(BaseModel):
    """A loaded spec file.

    Attributes:
        options: Builder options from the [options] table.
        tree: Raw specification from the [tree] table.
    """

    model_config = ConfigDict(extra="forbid")

    options: BuilderOptions = Field(default_factory=BuilderOptions)
    tree: dict[str, Any] = Field(default_factory=dict)


def spec_from_dict(data: Mapping[str, Any], path: str = "") -> dict[str, Any]:
    """Convert a parsed [tree] table into a raw specification.

    Args:
        data: Parsed TOML table.
        path: Location of the table, for error messages.

    Returns:
        Raw specification of strings, mappings and File/Dir descriptors.

    Raises:
        SpecFileValidationError: If a value cannot describe an entry.
    """
    return {key: _value_from_toml(value, f"{path}/{key}") for key, value in data.items()}


def _value_from_toml(value: Any, path: str) -> Any:
    if isinstance(value, str):
        return value
    if not isinstance(value, Mapping):
        msg = f"{path}: expected a string or table, got {type(value).__name__}"
        raise SpecFileValidationError(msg)
    if TYPE_KEY not in value:
        return spec_from_dict(value, path)

    try:
        if value[TYPE_KEY] == "file":
            return FileEntry.model_validate(value).to_descriptor()
        entry = DirEntry.model_validate(value)
    except (ValidationError, ValueError) as e:
        raise SpecFileValidationError(f"{path}: {e}") from e
    entries = spec_from_dict(entry.entries, path) if entry.entries is not None else None
    return Dir(perm=entry.perm, entries=entries)


def spec_to_dict(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Convert a raw specification into a TOML-serializable table.

    Raises:
        SpecFileValidationError: If the specification holds values that
            cannot be represented.
    """
    return {key: _value_to_toml(value, key) for key, value in raw.items()}


def _value_to_toml(value: Any, path: str) -> Any:
    if isinstance(value, str):
        return value
    if isinstance(value, bytes | bytearray):
        return _file_to_toml(DEFAULT_FILE_PERM, bytes(value))
    if isinstance(value, File):
        data = value.contents
        return _file_to_toml(value.perm, data.encode("utf-8") if isinstance(data, str) else data)
    if isinstance(value, Dir):
        table: dict[str, Any] = {TYPE_KEY: "dir", "perm": format_perm(value.perm)}
        if value.entries:
            table["entries"] = {
                k: _value_to_toml(v, f"{path}/{k}") for k, v in value.entries.items()
            }
        return table
    if isinstance(value, Mapping):
        return {k: _value_to_toml(v, f"{path}/{k}") for k, v in value.items()}
    msg = f"{path}: cannot serialize {type(value).__name__}"
    raise SpecFileValidationError(msg)


def _file_to_toml(perm: int, data: bytes) -> dict[str, Any]:
    table: dict[str, Any] = {TYPE_KEY: "file", "perm": format_perm(perm)}
    try:
        table["contents"] = data.decode("utf-8")
    except UnicodeDecodeError:
        table["contents_base64"] = base64.b64encode(data).decode("ascii")
    return table


def load_spec(path: Path) -> SpecFile:
    """Load and validate a spec file.

    Args:
        path: Path to the TOML spec file.

    Returns:
        Validated SpecFile.

    Raises:
        SpecFileNotFoundError: If the file doesn't exist.
        SpecFileParseError: If the TOML syntax is invalid.
        SpecFileValidationError: If the content doesn't describe a tree.
    """
    if not path.exists():
        raise SpecFileNotFoundError(f"Spec file not found: {path}")

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SpecFileParseError(f"Invalid TOML syntax: {e}") from e

    unknown = set(data) - {"options", "tree"}
    if unknown:
        msg = f"Unknown top-level tables: {', '.join(sorted(unknown))}"
        raise SpecFileValidationError(msg)

    tree = data.get("tree", {})
    if not isinstance(tree, Mapping):
        raise SpecFileValidationError("[tree] must be a table")

    try:
        options = BuilderOptions.model_validate(data.get("options", {}))
    except ValidationError as e:
        raise SpecFileValidationError(f"Invalid options: {e}") from e

    return SpecFile(options=options, tree=spec_from_dict(tree))


def save_spec(spec: SpecFile, path: Path) -> Path:
    """Save a spec file atomically.

    The file is first written to a temporary file in the same directory
    and then moved into place with os.replace().

    Args:
        spec: Spec file to save.
        path: Destination path.

    Returns:
        Path where the spec file was saved.

    Raises:
        SpecFileError: If the file cannot be written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    data = _spec_to_toml(spec)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(mode="wb", dir=path.parent, delete=False, suffix=".tmp") as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(tmp_path, path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SpecFileError(f"Failed to write spec file: {e}") from e

    return path


def dumps_spec(spec: SpecFile) -> str:
    """Render a spec file as a TOML string."""
    return tomli_w.dumps(_spec_to_toml(spec))


def _spec_to_toml(spec: SpecFile) -> dict[str, Any]:
    return {
        "options": {"umask": format_perm(spec.options.umask), "verbose": spec.options.verbose},
        "tree": spec_to_dict(spec.tree),
    }


def require_spec(path: Path) -> SpecFile:
    """Load a spec file or exit with a helpful error message.

    This is a convenience wrapper around load_spec() for CLI commands.

    Args:
        path: Path to the spec file.

    Returns:
        Loaded and validated SpecFile.

    Raises:
        typer.Exit: If the spec file cannot be loaded.
    """
    import typer

    from vfsbuild.utils.formatting import print_error, print_info

    try:
        return load_spec(path)
    except SpecFileNotFoundError as e:
        print_error(f"Spec file not found: {path}")
        print_info("Run 'vfsbuild snapshot' to capture an existing tree as a spec file.")
        raise typer.Exit(code=1) from e
    except SpecFileError as e:
        print_error(f"Failed to load spec file: {e}")
        raise typer.Exit(code=1) from e
