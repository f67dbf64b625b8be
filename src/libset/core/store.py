from __future__ import annotations

"""
Keyed Configuration Store.

Maps sanitized keys to files under a versioned (and optionally scoped)
application directory:

    <config dir>/<app name>/v<version>[/<scope>]/<key>.<ext>

Values are serialized with the format codec and written with an atomic
replace-on-write, so readers never observe a half-written file. There is
no index: existence and content are always read from the filesystem.
"""

import logging
import shutil
from pathlib import Path
from typing import Any, Optional, Type, TypeVar, Union

from libset.core.codec import deserialize, serialize
from libset.domain.constants import VERSION_DIR_PREFIX
from libset.domain.errors import FilesystemError, GetKeyError
from libset.domain.formats import Format
from libset.infra.fs import (
    atomic_write_bytes,
    ensure_dir,
    resolve_config_dir,
    sanitize_name,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
PathLike = Union[str, Path]


class Store:
    """
    Root-scoped key/value access to individual settings files.

    Use Store.open() to resolve and create the directory; the constructor
    only wraps an existing path.
    """

    def __init__(self, path: PathLike) -> None:
        self._path = Path(path)

    def __repr__(self) -> str:
        return f"Store({str(self._path)!r})"

    @classmethod
    def open(
            cls,
            app_name: str,
            version: int,
            scope: Optional[str] = None,
            *,
            base_dir: Optional[PathLike] = None,
    ) -> "Store":
        """
        Resolve and create the store directory for an application.

        Args:
            app_name: Application identifier, e.g. 'org.example.Demo'.
            version: Configuration schema version ('v<version>' directory).
            scope: Optional extra segment isolating a sub-namespace.
            base_dir: Overrides the platform configuration directory.

        Returns:
            Store: Ready-to-use store.

        Raises:
            InvalidNameError: If app_name or scope is not a single component.
            NoConfigDirectoryError: If the platform has no config directory.
            FilesystemError: If the directory cannot be created.
        """
        root = Path(sanitize_name(app_name)) / f"{VERSION_DIR_PREFIX}{int(version)}"
        if scope is not None:
            root = root / sanitize_name(scope)

        base = Path(base_dir) if base_dir is not None else resolve_config_dir()
        path = ensure_dir(base / root)
        logger.debug(f"Store opened at {path}")
        return cls(path)

    @property
    def root(self) -> Path:
        return self._path

    # -------------------------------------------------------------------------
    # Key resolution
    # -------------------------------------------------------------------------

    def path(self, key: str, fmt: Format) -> Path:
        """
        Return the file path backing a key.

        Raises:
            InvalidNameError: If the key is not a single safe component.
        """
        name = fmt.file_name(sanitize_name(key))
        return self._path / sanitize_name(name)

    def has(self, key: str, fmt: Format) -> bool:
        """Whether a key exists; any failure (invalid key included) reads as False."""
        try:
            return self.path(key, fmt).is_file()
        except Exception:
            return False

    # -------------------------------------------------------------------------
    # Typed access
    # -------------------------------------------------------------------------

    def get(self, key: str, fmt: Format, into: Optional[Type[T]] = None) -> Any:
        """
        Read and decode a stored value.

        Args:
            key: Key name (no extension).
            fmt: Structured format the value was stored with.
            into: Optional dataclass type to build from the decoded mapping.

        Raises:
            GetKeyError: If the file is missing or unreadable.
            DeserializeError: On parse errors (and for the plain format).
        """
        key_path = self.path(key, fmt)
        data = self._read(key, key_path)
        value = deserialize(data, fmt, into)
        logger.debug(f"Retrieved file from {key_path}.")
        return value

    def set(self, key: str, fmt: Format, value: Any) -> Path:
        """
        Serialize a value and atomically replace the key's file.

        Plain text values are accepted for the plain format; any other
        value with the plain format raises SerializeError.

        Returns:
            Path: File written.
        """
        key_path = self.path(key, fmt)
        data = serialize(value, fmt)
        atomic_write_bytes(key_path, data)
        logger.info(f"File written to {key_path}.")
        return key_path

    def remove(self, key: str, fmt: Format) -> None:
        """
        Delete a key's file.

        Raises:
            GetKeyError: If the key does not exist.
        """
        key_path = self.path(key, fmt)
        try:
            key_path.unlink()
        except OSError as e:
            raise GetKeyError(key, e) from e
        logger.info(f"Removed {key_path}.")

    def clean(self) -> None:
        """
        Remove the whole store directory and everything in it.

        Raises:
            FilesystemError: If the removal fails.
        """
        if not self._path.exists():
            return
        try:
            shutil.rmtree(self._path)
        except OSError as e:
            logger.error(f"Failed to clean {self._path}: {e}")
            raise FilesystemError(self._path, e) from e
        logger.info(f"Store cleaned: {self._path}")

    # -------------------------------------------------------------------------
    # Plain text passthrough
    # -------------------------------------------------------------------------

    def get_plain(self, key: str) -> str:
        key_path = self.path(key, Format.PLAIN)
        return self._read(key, key_path).decode("utf-8")

    def set_plain(self, key: str, value: Any) -> Path:
        key_path = self.path(key, Format.PLAIN)
        atomic_write_bytes(key_path, str(value).encode("utf-8"))
        logger.info(f"File written to {key_path}.")
        return key_path

    def has_plain(self, key: str) -> bool:
        return self.has(key, Format.PLAIN)

    # -------------------------------------------------------------------------
    # Per-format shortcuts
    # -------------------------------------------------------------------------

    def get_json(self, key: str, into: Optional[Type[T]] = None) -> Any:
        return self.get(key, Format.JSON, into)

    def set_json(self, key: str, value: Any) -> Path:
        return self.set(key, Format.JSON, value)

    def has_json(self, key: str) -> bool:
        return self.has(key, Format.JSON)

    def get_toml(self, key: str, into: Optional[Type[T]] = None) -> Any:
        return self.get(key, Format.TOML, into)

    def set_toml(self, key: str, value: Any) -> Path:
        return self.set(key, Format.TOML, value)

    def has_toml(self, key: str) -> bool:
        return self.has(key, Format.TOML)

    def get_ron(self, key: str, into: Optional[Type[T]] = None) -> Any:
        return self.get(key, Format.RON, into)

    def set_ron(self, key: str, value: Any) -> Path:
        return self.set(key, Format.RON, value)

    def has_ron(self, key: str) -> bool:
        return self.has(key, Format.RON)

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _read(key: str, key_path: Path) -> bytes:
        try:
            return key_path.read_bytes()
        except OSError as e:
            raise GetKeyError(key, e) from e
