from __future__ import annotations

"""
Element Tree Writer.

Materializes an element and its subtree on disk in pre-order, so every
directory exists before its children are written. Directories are
created only when missing; file elements are always truncated and
rewritten, which refreshes default content on every run.
"""

import logging
from pathlib import Path
from typing import List

from libset.core.codec import serialize
from libset.domain.element import Element
from libset.domain.errors import FilesystemError, UnresolvedPathError
from libset.domain.formats import Format

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def write_tree(root: Element) -> List[Path]:
    """
    Write an element tree to the filesystem.

    Directory creation is non-recursive: parents are expected to exist,
    either beforehand (the base directory) or because an ancestor element
    was written earlier in the same traversal. A failure aborts the
    traversal; anything already written stays on disk.

    Args:
        root: Subtree root with resolved paths.

    Returns:
        List[Path]: Paths of every element visited, in write order.

    Raises:
        UnresolvedPathError: If an element has no absolute path.
        FilesystemError: On any OS failure, tagged with the element path.
        SerializeError: If a file's content does not fit its format.
    """
    written: List[Path] = []
    for element in root.walk():
        write_element(element)
        written.append(element.path)
    logger.debug(f"Tree rooted at {root.path} written ({len(written)} entries).")
    return written


def write_element(element: Element) -> None:
    """Write a single element without descending into its children."""
    if element.path is None:
        raise UnresolvedPathError(element.name)

    if element.is_dir:
        _write_directory(element.path)
    else:
        _write_file(element)

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _write_directory(path: Path) -> None:
    if path.exists():
        return
    try:
        path.mkdir()
    except OSError as e:
        logger.error(f"Failed to create directory {path}: {e}")
        raise FilesystemError(path, e) from e
    logger.debug(f"Directory created: {path}")


def _write_file(element: Element) -> None:
    data = b""
    if element.content is not None:
        data = serialize(element.content, element.format or Format.PLAIN)

    try:
        with open(element.path, "wb") as f:
            f.write(data)
    except OSError as e:
        logger.error(f"Failed to write file {element.path}: {e}")
        raise FilesystemError(element.path, e) from e
    logger.debug(f"File written: {element.path} ({len(data)} bytes)")
