"""Data models for tree specifications, canonical nodes and build reports."""

from vfsbuild.models.node import DirNode, FileNode, Node, NodeKind
from vfsbuild.models.report import BuildReport, Mutation, Resolution
from vfsbuild.models.spec import DEFAULT_DIR_PERM, DEFAULT_FILE_PERM, Dir, File

__all__ = [
    "DEFAULT_DIR_PERM",
    "DEFAULT_FILE_PERM",
    "BuildReport",
    "Dir",
    "DirNode",
    "File",
    "FileNode",
    "Mutation",
    "Node",
    "NodeKind",
    "Resolution",
]
