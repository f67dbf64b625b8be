from __future__ import annotations

"""
libset: declarative application settings directories.

Describe a directory/file layout with elements, materialize it once,
then read and write individual settings files through a keyed store in
TOML, JSON, RON or plain text.
"""

from libset.core.codec import deserialize, extension, serialize
from libset.core.registry import Project
from libset.core.store import Store
from libset.core.tree.app_config import AppConfig
from libset.core.tree.writer import write_tree
from libset.domain.element import Element, ElementKind, new_directory, new_file, rebase
from libset.domain.errors import (
    AmbiguousError,
    DeserializeError,
    FilesystemError,
    GetKeyError,
    InvalidElementError,
    InvalidNameError,
    LibsetError,
    NoConfigDirectoryError,
    NotFoundError,
    SerializeError,
    UnresolvedPathError,
)
from libset.domain.formats import Format
from libset.domain.project_models import ProjectFile, ProjectMetadata
from libset.infra.fs import sanitize_name

__version__ = "0.2.0"

__all__ = [
    "AppConfig",
    "Element",
    "ElementKind",
    "Format",
    "Project",
    "ProjectFile",
    "ProjectMetadata",
    "Store",
    "deserialize",
    "extension",
    "new_directory",
    "new_file",
    "rebase",
    "sanitize_name",
    "serialize",
    "write_tree",
    # errors
    "AmbiguousError",
    "DeserializeError",
    "FilesystemError",
    "GetKeyError",
    "InvalidElementError",
    "InvalidNameError",
    "LibsetError",
    "NoConfigDirectoryError",
    "NotFoundError",
    "SerializeError",
    "UnresolvedPathError",
]
