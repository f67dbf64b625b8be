from __future__ import annotations

"""
Error Taxonomy.

Defines the exception hierarchy raised by the tree writer, the keyed
store and the project registry. Every failure is surfaced to the immediate
caller as a subclass of LibsetError; the original low-level cause is kept
both as an attribute and as the chained exception.
"""

from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Union

if TYPE_CHECKING:
    from libset.domain.formats import Format

PathLike = Union[str, Path]


# -----------------------------------------------------------------------------
# BASE
# -----------------------------------------------------------------------------

class LibsetError(Exception):
    """Root of every error raised by libset."""


# -----------------------------------------------------------------------------
# NAMING AND RESOLUTION
# -----------------------------------------------------------------------------

class InvalidNameError(LibsetError):
    """
    A key, application name or scope is not a single safe path component.

    Attributes:
        name: The rejected input, verbatim.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"'{name}' is not a valid name, avoid empty names, separators, '.' or '..'."
        )


class NoConfigDirectoryError(LibsetError):
    """The platform could not resolve a base configuration directory."""

    def __init__(self, kind: str = "config") -> None:
        self.kind = kind
        super().__init__(f"Platform {kind} directory not found.")


# -----------------------------------------------------------------------------
# FILESYSTEM
# -----------------------------------------------------------------------------

class FilesystemError(LibsetError):
    """
    Generic filesystem failure tagged with the offending path.

    Attributes:
        path: Path being created, read or written.
        cause: Underlying OSError.
    """

    def __init__(self, path: PathLike, cause: Optional[BaseException] = None) -> None:
        self.path = Path(path)
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Filesystem error at '{self.path}'{detail}")


class UnresolvedPathError(LibsetError):
    """An element reached the writer before its absolute path was resolved."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Element '{name}' has no resolved path; attach it to a rooted tree first."
        )


class InvalidElementError(LibsetError):
    """A structural change would break the element tree invariants."""


# -----------------------------------------------------------------------------
# KEYED ACCESS AND CODEC
# -----------------------------------------------------------------------------

class GetKeyError(LibsetError):
    """
    A stored key could not be read.

    Attributes:
        key: Requested key.
        cause: Underlying OSError (missing file, permission denied...).
    """

    def __init__(self, key: str, cause: Optional[BaseException] = None) -> None:
        self.key = key
        self.cause = cause
        super().__init__(f"Failed to get key {key} : {cause}")


class SerializeError(LibsetError):
    """A value could not be encoded in the requested format."""

    def __init__(self, fmt: "Format", cause: Union[BaseException, str]) -> None:
        self.format = fmt
        self.cause = cause
        super().__init__(f"Failed to serialize {fmt.label} content: {cause}")


class DeserializeError(LibsetError):
    """Stored bytes could not be decoded in the requested format."""

    def __init__(self, fmt: "Format", cause: Union[BaseException, str]) -> None:
        self.format = fmt
        self.cause = cause
        super().__init__(f"Failed to parse {fmt.label} file: {cause}")


# -----------------------------------------------------------------------------
# REGISTRY SEARCH
# -----------------------------------------------------------------------------

class NotFoundError(LibsetError):
    """A lookup matched nothing."""


class AmbiguousError(LibsetError):
    """
    A lookup that requires exactly one match found several.

    Attributes:
        matches: Paths of every candidate found.
    """

    def __init__(self, name: str, matches: List[Path]) -> None:
        self.name = name
        self.matches = list(matches)
        super().__init__(f"'{name}' is ambiguous, {len(self.matches)} files match.")
