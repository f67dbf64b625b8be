from __future__ import annotations

"""
Application Configuration Root.

Owns the element tree of one application under the user data directory
and keeps a self-description of it ('app.toml' or 'app.json') next to
the layout, so the structure can be re-derived later from the
application name alone.
"""

import logging
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from libset.core.codec import deserialize, serialize
from libset.core.tree.writer import write_tree
from libset.domain.constants import APP_DESCRIPTION_STEM, DEFAULT_DESCRIPTION_FORMAT
from libset.domain.element import Element, new_directory, new_file, rebase
from libset.domain.errors import DeserializeError, FilesystemError, LibsetError
from libset.domain.formats import Format
from libset.infra.fs import atomic_write_bytes, resolve_data_dir, sanitize_name

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class AppConfig:
    """
    Config root: application metadata plus its element tree.

    The root directory element resolves to '<base_dir>/<name>' and always
    starts with the self-description file element.
    """

    def __init__(
            self,
            name: str,
            *,
            base_dir: Optional[PathLike] = None,
            description_format: Format = DEFAULT_DESCRIPTION_FORMAT,
    ) -> None:
        if not description_format.is_structured:
            raise ValueError("The self-description needs a structured format.")

        self.name = sanitize_name(name)
        self.author = ""
        self.version = ""
        self.about = ""
        self.description_format = description_format
        self.base_dir = Path(base_dir) if base_dir is not None else resolve_data_dir()

        self.root: Element = new_directory(self.name)
        rebase(self.root, self.base_dir)
        self.root.add_child(new_file(self.description_name))

    def __repr__(self) -> str:
        return f"AppConfig(name={self.name!r}, path={str(self.path)!r})"

    # -------------------------------------------------------------------------
    # Metadata (chained)
    # -------------------------------------------------------------------------

    def set_author(self, author: str) -> "AppConfig":
        self.author = author
        return self

    def set_version(self, version: str) -> "AppConfig":
        self.version = version
        return self

    def set_about(self, about: str) -> "AppConfig":
        self.about = about
        return self

    # -------------------------------------------------------------------------
    # Layout
    # -------------------------------------------------------------------------

    @property
    def path(self) -> Path:
        return self.base_dir / self.name

    @property
    def description_name(self) -> str:
        return self.description_format.file_name(APP_DESCRIPTION_STEM)

    @property
    def description_path(self) -> Path:
        return self.path / self.description_name

    @property
    def elements(self) -> List[Element]:
        return self.root.children

    def add(self, element: Element) -> "AppConfig":
        """Attach an element under the application directory."""
        self.root.add_child(element)
        return self

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def write(self) -> "AppConfig":
        """
        Materialize the tree, then persist the self-description atomically.

        The base directory itself is created if missing; below it the
        writer creates directories one level at a time.
        """
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(self.base_dir, e) from e

        write_tree(self.root)
        atomic_write_bytes(
            self.description_path,
            serialize(self.describe(), self.description_format),
        )
        logger.info(f"Application layout written to {self.path}")
        return self

    def describe(self) -> Dict[str, Any]:
        """Snapshot of metadata and structure, as stored in the description file."""
        return {
            "name": self.name,
            "author": self.author,
            "version": self.version,
            "about": self.about,
            "elements": [child.to_dict() for child in self.root.children],
        }

    def is_written(self) -> bool:
        return AppConfig.current(
            self.name,
            base_dir=self.base_dir,
            description_format=self.description_format,
        ) is not None

    def clear(self) -> None:
        """
        Remove the application directory and everything in it.

        Raises:
            FilesystemError: If the removal fails.
        """
        if not self.path.exists():
            return
        try:
            shutil.rmtree(self.path)
        except OSError as e:
            logger.error(f"Failed to clear {self.path}: {e}")
            raise FilesystemError(self.path, e) from e
        logger.info(f"Application directory cleared: {self.path}")

    @classmethod
    def current(
            cls,
            name: str,
            *,
            base_dir: Optional[PathLike] = None,
            description_format: Format = DEFAULT_DESCRIPTION_FORMAT,
    ) -> Optional["AppConfig"]:
        """
        Re-derive a written configuration from its self-description.

        Returns:
            Optional[AppConfig]: None when nothing readable was written.
        """
        config = cls(name, base_dir=base_dir, description_format=description_format)
        try:
            data = config.description_path.read_bytes()
        except OSError:
            return None

        try:
            described = deserialize(data, description_format)
        except DeserializeError as e:
            logger.warning(f"Unreadable description at {config.description_path}: {e}")
            return None
        if not isinstance(described, dict):
            return None

        config.author = str(described.get("author", ""))
        config.version = str(described.get("version", ""))
        config.about = str(described.get("about", ""))

        try:
            children = [Element.from_dict(item) for item in described.get("elements", [])]
        except (LibsetError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Malformed element list in {config.description_path}: {e}")
            return None

        config.root.children = []
        for child in children:
            config.root.add_child(child)
        return config
