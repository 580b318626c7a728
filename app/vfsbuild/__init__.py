"""vfsbuild - Declarative, idempotent filesystem tree builder.

Describe the directories and files you want as nested mappings, build
them onto a filesystem, and build again safely: entries that already
match are left alone and anything that differs is reported as a
conflict instead of being overwritten.
"""

from vfsbuild.core.builder import Builder
from vfsbuild.core.errors import (
    AttributeConflictError,
    BuildError,
    ConflictError,
    InvalidSpecificationError,
    MissingParentError,
    PathConflictError,
    TypeConflictError,
)
from vfsbuild.core.normalizer import normalize
from vfsbuild.core.options import BuilderOptions
from vfsbuild.models.report import BuildReport, Mutation, Resolution
from vfsbuild.models.spec import Dir, File

__version__ = "0.1.0"

__all__ = [
    "AttributeConflictError",
    "BuildError",
    "BuildReport",
    "Builder",
    "BuilderOptions",
    "ConflictError",
    "Dir",
    "File",
    "InvalidSpecificationError",
    "MissingParentError",
    "Mutation",
    "PathConflictError",
    "Resolution",
    "TypeConflictError",
    "__version__",
    "normalize",
]
