"""Slash-delimited tree path handling.

All paths inside a tree are absolute, use "/" as separator, and are
independent of the host platform. The root is "/".
"""

from vfsbuild.core.errors import InvalidSpecificationError

ROOT = "/"


def split_path(path: str) -> list[str]:
    """Split a path into its non-empty components.

    "." components are dropped. ".." is rejected because a tree path
    can never leave its root.

    Args:
        path: Absolute or relative slash-delimited path.

    Returns:
        List of path components, empty for the root.

    Raises:
        InvalidSpecificationError: If a component is "..".
    """
    parts: list[str] = []
    for part in path.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            msg = "parent references are not allowed"
            raise InvalidSpecificationError(path, msg)
        parts.append(part)
    return parts


def clean_path(path: str) -> str:
    """Normalize a path to a single leading slash and no trailing slash.

    Examples:
        >>> clean_path("home//user/")
        '/home/user'
        >>> clean_path("")
        '/'
    """
    return ROOT + "/".join(split_path(path))


def join_path(parent: str, name: str) -> str:
    """Join a cleaned parent path and a (possibly nested) name."""
    return clean_path(f"{parent}/{name}")


def parent_path(path: str) -> str:
    """Return the parent of a cleaned path. The root is its own parent."""
    parts = split_path(path)
    return ROOT + "/".join(parts[:-1])


def ancestors(path: str) -> list[str]:
    """Return the ancestors of a path, shallowest first, root excluded.

    Examples:
        >>> ancestors("/usr/local/bin")
        ['/usr', '/usr/local']
    """
    parts = split_path(path)
    return [ROOT + "/".join(parts[:i]) for i in range(1, len(parts))]
