from __future__ import annotations

"""
Project Registry Service.

Persists an application's descriptive metadata as
'<qualifier>.<organization>.<application>.toml' inside its project
directory and offers name-based lookups over the files stored there.
Every metadata mutation rewrites the whole record immediately.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple, Union

from libset.core.codec import deserialize, serialize
from libset.domain.constants import PROJECT_RECORD_FORMAT, SEARCHABLE_FORMATS
from libset.domain.errors import AmbiguousError, DeserializeError, FilesystemError, NotFoundError
from libset.domain.formats import Format
from libset.domain.project_models import ProjectFile, ProjectMetadata
from libset.infra.fs import (
    atomic_write_bytes,
    ensure_dir,
    resolve_project_dir,
    sanitize_name,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class Project:
    """
    Write-through handle over a project's metadata record and directory.
    """

    def __init__(self, metadata: ProjectMetadata, path: PathLike) -> None:
        self._metadata = metadata
        self._path = Path(path)

    def __repr__(self) -> str:
        return f"Project({self._metadata.record_name!r}, path={str(self._path)!r})"

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def open_or_create(
            cls,
            qualifier: str,
            organization: str,
            application: str,
            *,
            base_dir: Optional[PathLike] = None,
    ) -> "Project":
        """
        Create the project directory if needed and persist a fresh record.

        Args:
            qualifier: e.g. 'com'.
            organization: e.g. 'example'.
            application: e.g. 'App'.
            base_dir: Overrides the platform data directory; the project
                then lives in '<base_dir>/<qualifier>.<organization>.<application>'.

        Raises:
            InvalidNameError: If an identity component is not path-safe.
            NoConfigDirectoryError: If no project directory can be resolved.
            FilesystemError: If the directory or record cannot be written.
        """
        metadata = ProjectMetadata(
            qualifier=sanitize_name(qualifier),
            organization=sanitize_name(organization),
            application=sanitize_name(application),
        )
        project = cls(metadata, cls._resolve_path(metadata, base_dir))
        ensure_dir(project.path)
        project._persist()
        logger.info(f"Project registered at {project.path}")
        return project

    @classmethod
    def open(
            cls,
            qualifier: str,
            organization: str,
            application: str,
            *,
            base_dir: Optional[PathLike] = None,
    ) -> "Project":
        """
        Load an existing project record.

        Raises:
            NotFoundError: If the record file does not exist.
            DeserializeError: If the record cannot be parsed.
        """
        identity = ProjectMetadata(
            qualifier=sanitize_name(qualifier),
            organization=sanitize_name(organization),
            application=sanitize_name(application),
        )
        path = cls._resolve_path(identity, base_dir)
        record = path / PROJECT_RECORD_FORMAT.file_name(identity.record_name)
        try:
            data = record.read_bytes()
        except OSError as e:
            raise NotFoundError(f"Project record not found at '{record}'.") from e

        metadata = ProjectMetadata.from_dict(deserialize(data, PROJECT_RECORD_FORMAT))
        return cls(metadata, path)

    @staticmethod
    def _resolve_path(metadata: ProjectMetadata, base_dir: Optional[PathLike]) -> Path:
        if base_dir is not None:
            return Path(base_dir) / metadata.record_name
        return resolve_project_dir(metadata.qualifier, metadata.organization, metadata.application)

    # -------------------------------------------------------------------------
    # Metadata (write-through)
    # -------------------------------------------------------------------------

    @property
    def metadata(self) -> ProjectMetadata:
        return self._metadata

    @property
    def path(self) -> Path:
        return self._path

    @property
    def record_path(self) -> Path:
        return self._path / PROJECT_RECORD_FORMAT.file_name(self._metadata.record_name)

    def set_author(self, author: str) -> "Project":
        self._metadata.author = author
        self._persist()
        return self

    def set_version(self, version: str) -> "Project":
        self._metadata.version = version
        self._persist()
        return self

    def set_about(self, about: str) -> "Project":
        self._metadata.about = about
        self._persist()
        return self

    def _persist(self) -> None:
        data = serialize(self._metadata.to_dict(), PROJECT_RECORD_FORMAT)
        atomic_write_bytes(self.record_path, data)
        logger.debug(f"Project record saved to {self.record_path}")

    # -------------------------------------------------------------------------
    # Files
    # -------------------------------------------------------------------------

    def add_files(self, files: Iterable[ProjectFile]) -> "Project":
        """
        Place files in the project directory.

        Each file lands at '<project dir>/<name>.<ext>'. Files that already
        exist are left untouched, so defaults never clobber user edits.
        """
        for file in files:
            file.path = self._path / sanitize_name(file.file_name)
            if file.path.exists():
                logger.debug(f"Keeping existing file {file.path}")
                continue
            file.write()
            logger.info(f"Project file created: {file.path}")
        return self

    def find(self, name: str, fmt: Optional[Format] = None) -> List[ProjectFile]:
        """
        Search the project tree for files whose name contains a substring.

        Args:
            name: Substring of the file name.
            fmt: Restrict matches to one format; by default any structured
                format (toml, json, ron) matches.

        Returns:
            List[ProjectFile]: Matches with their current content, sorted by path.

        Raises:
            FilesystemError: If a matching file cannot be read.
            DeserializeError: If a matching file is not valid UTF-8.
        """
        formats = (fmt,) if fmt is not None else SEARCHABLE_FORMATS
        matches: List[ProjectFile] = []
        visited: Set[Tuple[int, int]] = set()

        for dirpath, dirnames, filenames in os.walk(self._path, followlinks=True):
            if not _first_visit(Path(dirpath), visited):
                dirnames[:] = []
                continue
            for file_name in sorted(filenames):
                if name not in file_name:
                    continue
                file_fmt = Format.from_extension(file_name)
                if file_fmt not in formats:
                    continue
                full = Path(dirpath) / file_name
                try:
                    content = full.read_text(encoding="utf-8")
                except OSError as e:
                    raise FilesystemError(full, e) from e
                except UnicodeDecodeError as e:
                    raise DeserializeError(file_fmt, e) from e
                matches.append(ProjectFile(
                    name=_strip_extension(file_name, file_fmt),
                    format=file_fmt,
                    content=content,
                    path=full,
                ))

        matches.sort(key=lambda f: str(f.path))
        logger.debug(f"Search '{name}' in {self._path}: {len(matches)} match(es)")
        return matches

    def get_file(self, name: str, fmt: Format) -> ProjectFile:
        """
        Return the single file matching a name substring and format.

        Raises:
            NotFoundError: If nothing matches.
            AmbiguousError: If more than one file matches.
        """
        matches = self.find(name, fmt)
        if not matches:
            raise NotFoundError(f"No {fmt.label} file matching '{name}' in '{self._path}'.")
        if len(matches) > 1:
            raise AmbiguousError(name, [m.path for m in matches])
        return matches[0]

    def clear(self) -> None:
        """
        Remove the project directory, record included.

        Raises:
            FilesystemError: If the removal fails.
        """
        if not self._path.exists():
            return
        try:
            shutil.rmtree(self._path)
        except OSError as e:
            logger.error(f"Failed to clear project directory {self._path}: {e}")
            raise FilesystemError(self._path, e) from e
        logger.info(f"Project directory cleared: {self._path}")


# -----------------------------------------------------------------------------
# SEARCH HELPERS
# -----------------------------------------------------------------------------

def _first_visit(directory: Path, visited: Set[Tuple[int, int]]) -> bool:
    """Record a directory by (device, inode); False if a link already led here."""
    try:
        st = directory.stat()
    except OSError as e:
        raise FilesystemError(directory, e) from e
    key = (st.st_dev, st.st_ino)
    if key in visited:
        logger.debug(f"Skipping link loop at {directory}")
        return False
    visited.add(key)
    return True


def _strip_extension(file_name: str, fmt: Format) -> str:
    if not fmt.extension:
        return file_name
    return file_name[: -(len(fmt.extension) + 1)]
