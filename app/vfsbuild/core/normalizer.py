"""Raw specification normalizer.

Converts an arbitrarily shaped raw specification (see vfsbuild.models.spec)
into a canonical tree of FileNode and DirNode objects rooted at "/".
Normalization is a pure transformation and performs no I/O.
"""

from collections.abc import Mapping
from typing import Any

from vfsbuild.core.errors import InvalidSpecificationError
from vfsbuild.core.paths import ROOT, join_path, split_path
from vfsbuild.models.node import DirNode, FileNode, Node
from vfsbuild.models.spec import DEFAULT_DIR_PERM, DEFAULT_FILE_PERM, Dir, File


def normalize(raw: Any) -> DirNode:
    """Normalize a raw specification into a canonical tree.

    The top level must be a mapping or a Dir descriptor; None is accepted
    as an empty tree. A root given as a mapping is implicit, so only a
    Dir descriptor makes the build verify the root's own permission.

    Args:
        raw: Raw specification value.

    Returns:
        Root DirNode of the canonical tree.

    Raises:
        InvalidSpecificationError: If any value has an unrecognized shape
            or two keys collide.
    """
    if raw is None:
        return DirNode(perm=DEFAULT_DIR_PERM, implicit=True)

    if isinstance(raw, Dir):
        root = DirNode(perm=raw.perm)
        _add_entries(root, ROOT, _entries(ROOT, raw.entries))
        return root

    if isinstance(raw, Mapping):
        root = DirNode(perm=DEFAULT_DIR_PERM, implicit=True)
        _add_entries(root, ROOT, raw)
        return root

    msg = f"expected a mapping or Dir at the root, got {type(raw).__name__}"
    raise InvalidSpecificationError(ROOT, msg)


def _convert(path: str, value: Any) -> Node:
    """Convert one raw value into a canonical node."""
    if isinstance(value, str | bytes | bytearray):
        return FileNode(perm=DEFAULT_FILE_PERM, contents=_contents(path, value))

    if isinstance(value, File):
        return FileNode(perm=value.perm, contents=_contents(path, value.contents))

    if isinstance(value, Dir):
        node = DirNode(perm=value.perm)
        _add_entries(node, path, _entries(path, value.entries))
        return node

    if isinstance(value, Mapping):
        node = DirNode(perm=DEFAULT_DIR_PERM)
        _add_entries(node, path, value)
        return node

    msg = f"unsupported specification type {type(value).__name__}"
    raise InvalidSpecificationError(path, msg)


def _add_entries(directory: DirNode, path: str, entries: Mapping[Any, Any]) -> None:
    """Normalize a mapping of entries into an existing directory node.

    Keys with embedded separators are split and the intermediate
    directories are synthesized as implicit nodes.
    """
    for key, value in entries.items():
        if not isinstance(key, str):
            msg = f"entry names must be strings, got {type(key).__name__}"
            raise InvalidSpecificationError(path, msg)

        parts = split_path(key)
        if not parts:
            msg = f"entry name {key!r} does not name a child"
            raise InvalidSpecificationError(path, msg)

        parent = directory
        parent_path = path
        for name in parts[:-1]:
            parent_path = join_path(parent_path, name)
            parent = _implicit_child(parent, parent_path, name)

        child_path = join_path(parent_path, parts[-1])
        _insert(parent, parts[-1], child_path, _convert(child_path, value))


def _implicit_child(directory: DirNode, path: str, name: str) -> DirNode:
    """Return the named child directory, synthesizing it if missing."""
    existing = directory.entries.get(name)
    if existing is None:
        child = DirNode(perm=DEFAULT_DIR_PERM, implicit=True)
        directory.entries[name] = child
        return child
    if isinstance(existing, FileNode):
        msg = "declared both as a file and as a directory"
        raise InvalidSpecificationError(path, msg)
    return existing


def _insert(directory: DirNode, name: str, path: str, node: Node) -> None:
    """Insert a node, merging it with a directory already declared there."""
    existing = directory.entries.get(name)
    if existing is None:
        directory.entries[name] = node
        return
    directory.entries[name] = _merge(path, existing, node)


def _merge(path: str, existing: Node, node: Node) -> DirNode:
    """Merge two declarations of the same path.

    Only directories merge. An explicit directory's permission replaces
    an implicit one; two explicit directories must agree.
    """
    if isinstance(existing, FileNode) or isinstance(node, FileNode):
        msg = "declared more than once"
        raise InvalidSpecificationError(path, msg)

    if existing.implicit and not node.implicit:
        existing.perm = node.perm
        existing.implicit = False
    elif not existing.implicit and not node.implicit and existing.perm != node.perm:
        msg = f"declared with conflicting permissions {existing.perm:04o} and {node.perm:04o}"
        raise InvalidSpecificationError(path, msg)

    for name, child in node.entries.items():
        _insert(existing, name, join_path(path, name), child)
    return existing


def _entries(path: str, entries: Any) -> Mapping[Any, Any]:
    if entries is None:
        return {}
    if not isinstance(entries, Mapping):
        msg = f"directory entries must be a mapping, got {type(entries).__name__}"
        raise InvalidSpecificationError(path, msg)
    return entries


def _contents(path: str, contents: Any) -> bytes:
    if isinstance(contents, bytes | bytearray):
        return bytes(contents)
    if isinstance(contents, str):
        return contents.encode("utf-8")
    msg = f"file contents must be bytes or str, got {type(contents).__name__}"
    raise InvalidSpecificationError(path, msg)
