"""Build error taxonomy.

Every failure the builder decides on itself is a BuildError subclass
carrying the offending path. Errors raised by the underlying storage
(OSError and friends) are never wrapped and reach the caller unchanged.
"""


class BuildError(Exception):
    """Base exception for builder-detected failures.

    Attributes:
        path: Absolute tree path the failure refers to.
    """

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path
        self.message = message


class InvalidSpecificationError(BuildError):
    """Raised when a raw specification value has an unrecognized shape."""


class MissingParentError(BuildError):
    """Raised when a non-recursive creation targets a missing parent."""


class PathConflictError(BuildError):
    """Raised when a non-directory component obstructs a target path."""


class ConflictError(BuildError):
    """Base for conflicts between existing state and the requested state."""


class TypeConflictError(ConflictError):
    """Raised when an existing entry has the wrong kind."""


class AttributeConflictError(ConflictError):
    """Raised when an existing entry has the wrong permission or contents."""
