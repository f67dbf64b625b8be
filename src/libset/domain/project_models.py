from __future__ import annotations

"""
Project Registry Data Models.

Defines the persisted project metadata record and the lightweight file
descriptor returned by registry searches.
"""

from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Optional

from libset.core.codec import serialize
from libset.domain.errors import SerializeError
from libset.domain.formats import Format
from libset.infra.fs import atomic_write_text


@dataclass
class ProjectMetadata:
    """
    Descriptive identity of an application.

    Attributes:
        qualifier: Reverse-domain qualifier ('com', 'org'...).
        organization: Publishing organization.
        application: Application name.
        author: Free-form author string.
        version: Free-form version string.
        about: Short description.
    """
    qualifier: str
    organization: str
    application: str
    author: str = ""
    version: str = ""
    about: str = ""

    @property
    def record_name(self) -> str:
        """Stem of the record file: '<qualifier>.<organization>.<application>'."""
        return f"{self.qualifier}.{self.organization}.{self.application}"

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectMetadata":
        return cls(
            qualifier=str(data.get("qualifier", "")),
            organization=str(data.get("organization", "")),
            application=str(data.get("application", "")),
            author=str(data.get("author", "")),
            version=str(data.get("version", "")),
            about=str(data.get("about", "")),
        )


@dataclass
class ProjectFile:
    """
    A file living in a project directory.

    'name' is the logical name: the on-disk file name is 'name' plus the
    format's extension. Search results carry the same logical name (the
    extension stripped) and the current content, so they can be handed
    back to add_files unchanged.
    """
    name: str
    format: Format = Format.TOML
    content: str = ""
    path: Optional[Path] = None

    @property
    def file_name(self) -> str:
        return self.format.file_name(self.name)

    def set_format(self, fmt: Format) -> "ProjectFile":
        self.format = fmt
        return self

    def set_content(self, value: Any) -> "ProjectFile":
        """
        Serialize a structured value into this file's content.

        Raises:
            SerializeError: For plain files (use set_text) or codec failures.
        """
        if not self.format.is_structured:
            raise SerializeError(self.format, "plain files take text, use set_text()")
        self.content = serialize(value, self.format).decode("utf-8")
        return self

    def set_text(self, text: str) -> "ProjectFile":
        """
        Store raw text; only plain files accept it.

        Raises:
            SerializeError: For structured formats (use set_content).
        """
        if self.format.is_structured:
            raise SerializeError(self.format, "structured files take values, use set_content()")
        self.content = text
        return self

    def write(self) -> Path:
        """Atomically persist the content to 'path'."""
        if self.path is None:
            raise ValueError(f"File '{self.name}' has no path; add it to a project first.")
        return atomic_write_text(self.path, self.content)
