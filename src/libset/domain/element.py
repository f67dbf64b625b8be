from __future__ import annotations

"""
Element Tree Data Models.

Provides the recursive node type used to describe a directory/file layout
before it is written to disk, and the path propagation that keeps every
node's absolute path derived from its parent.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from libset.domain.errors import InvalidElementError
from libset.domain.formats import Format

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

class ElementKind(Enum):
    DIRECTORY = "directory"
    FILE = "file"


@dataclass
class Element:
    """
    A named directory or file entry of the layout.

    Attributes:
        name: Entry name; an empty name resolves to the parent path itself.
        kind: Directory (may hold children) or file (leaf).
        path: Absolute path, assigned by rebase(); None while detached.
        format: Codec used to serialize 'content' (files only).
        content: Typed value or text written into the file (files only).
        children: Ordered sub-entries; order defines write order.
    """
    name: str
    kind: ElementKind = ElementKind.DIRECTORY
    path: Optional[Path] = None
    format: Optional[Format] = None
    content: Any = None
    children: List["Element"] = field(default_factory=list)

    # -------------------------------------------------------------------------
    # Chained configuration
    # -------------------------------------------------------------------------

    @property
    def is_dir(self) -> bool:
        return self.kind is ElementKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind is ElementKind.FILE

    def set_kind(self, kind: ElementKind) -> "Element":
        if kind is ElementKind.FILE and self.children:
            raise InvalidElementError(
                f"'{self.name}' has {len(self.children)} children and cannot become a file."
            )
        self.kind = kind
        return self

    def set_format(self, fmt: Optional[Format]) -> "Element":
        self.format = fmt
        return self

    def set_content(self, content: Any, fmt: Optional[Format] = None) -> "Element":
        """Attach content to a file element, optionally choosing its format."""
        if not self.is_file:
            raise InvalidElementError(f"Directory '{self.name}' cannot carry content.")
        self.content = content
        if fmt is not None:
            self.format = fmt
        return self

    def add_child(self, child: "Element") -> "Element":
        """
        Append a child and resolve the paths of its whole subtree.

        Args:
            child: Detached or previously attached element.

        Returns:
            Element: self, for chaining.

        Raises:
            InvalidElementError: If self is a file element.
        """
        if self.is_file:
            raise InvalidElementError(f"File '{self.name}' cannot have children.")
        self.children.append(child)
        rebase(child, self.path)
        return self

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    def walk(self) -> Iterator["Element"]:
        """Yield this element and every descendant, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, name: str) -> Optional["Element"]:
        """Return the first descendant (pre-order, self excluded) named ``name``."""
        for element in self.walk():
            if element is not self and element.name == name:
                return element
        return None

    # -------------------------------------------------------------------------
    # Self-description
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Structural snapshot without content; None fields are omitted (TOML-safe)."""
        data: Dict[str, Any] = {"name": self.name, "kind": self.kind.value}
        if self.path is not None:
            data["path"] = str(self.path)
        if self.format is not None:
            data["format"] = self.format.label
        if self.children:
            data["children"] = [c.to_dict() for c in self.children]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Element":
        fmt = data.get("format")
        path = data.get("path")
        return cls(
            name=str(data.get("name", "")),
            kind=ElementKind(data.get("kind", ElementKind.DIRECTORY.value)),
            path=Path(path) if path else None,
            format=Format.parse(fmt) if fmt is not None else None,
            children=[cls.from_dict(c) for c in data.get("children", [])],
        )

# -----------------------------------------------------------------------------
# BUILDERS
# -----------------------------------------------------------------------------

def new_directory(name: str) -> Element:
    return Element(name=name, kind=ElementKind.DIRECTORY)


def new_file(name: str, fmt: Optional[Format] = None, content: Any = None) -> Element:
    return Element(name=name, kind=ElementKind.FILE, format=fmt, content=content)


def rebase(element: Element, parent_path: Optional[Path]) -> Element:
    """
    Recompute the absolute path of an element and all of its descendants.

    Paths are derived, never set independently: each node becomes
    'parent_path / name' (or parent_path itself for an empty name).
    With no parent path the subtree is marked unresolved.

    Args:
        element: Subtree root.
        parent_path: Absolute path of the new parent, or the base directory.

    Returns:
        Element: The same element, with its subtree rebased.
    """
    if parent_path is None:
        element.path = None
    else:
        parent_path = Path(parent_path)
        element.path = parent_path / element.name if element.name else parent_path

    for child in element.children:
        rebase(child, element.path)
    return element
