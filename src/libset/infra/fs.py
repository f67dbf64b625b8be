from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides platform directory resolution, path-component sanitization and
atomic replace-on-write. Acts as the single abstraction over 'os',
'tempfile' and 'platformdirs' so the store, the tree writer and the
registry behave uniformly across Windows and Unix-like systems.
"""

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Optional, Union

from platformdirs import PlatformDirs, user_config_dir, user_data_dir

from libset.domain.constants import CONFIG_HOME_ENV, DATA_HOME_ENV
from libset.domain.errors import FilesystemError, InvalidNameError, NoConfigDirectoryError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def resolve_config_dir() -> Path:
    """
    Resolve the OS-conventional user configuration directory.

    Standards:
    - $LIBSET_CONFIG_HOME when set
    - Linux: $XDG_CONFIG_HOME or ~/.config
    - macOS: ~/Library/Application Support
    - Windows: %LOCALAPPDATA%

    Returns:
        Path: Absolute base directory. Nothing is created.

    Raises:
        NoConfigDirectoryError: If no directory can be determined.
    """
    return _resolve(CONFIG_HOME_ENV, user_config_dir, "config")


def resolve_data_dir() -> Path:
    """
    Resolve the OS-conventional user data directory.

    Returns:
        Path: Absolute base directory. Nothing is created.

    Raises:
        NoConfigDirectoryError: If no directory can be determined.
    """
    return _resolve(DATA_HOME_ENV, user_data_dir, "data")


def resolve_project_dir(qualifier: str, organization: str, application: str) -> Path:
    """
    Resolve the per-project data directory for a three-part identity.

    With $LIBSET_DATA_HOME set the directory is
    '<data home>/<qualifier>.<organization>.<application>'; otherwise the
    platformdirs convention for (application, organization) is used.
    """
    override = os.environ.get(DATA_HOME_ENV, "").strip()
    if override:
        return Path(override).expanduser().absolute() / f"{qualifier}.{organization}.{application}"

    try:
        dirs = PlatformDirs(appname=application, appauthor=organization)
        path = dirs.user_data_path
    except Exception as e:
        logger.error(f"Project directory resolution failed: {e}")
        raise NoConfigDirectoryError("project") from e
    if not str(path):
        raise NoConfigDirectoryError("project")
    return path.absolute()


def _resolve(env_var: str, resolver, kind: str) -> Path:
    """Environment override first, platformdirs second."""
    override = os.environ.get(env_var, "").strip()
    if override:
        return Path(override).expanduser().absolute()

    try:
        raw = resolver()
    except Exception as e:
        logger.error(f"Platform {kind} directory resolution failed: {e}")
        raise NoConfigDirectoryError(kind) from e

    if not raw:
        raise NoConfigDirectoryError(kind)
    return Path(raw).absolute()

# -----------------------------------------------------------------------------
# NAME SANITIZATION API
# -----------------------------------------------------------------------------

def sanitize_name(name: str) -> str:
    """
    Verify that a name is one normal, relative path component.

    Rejected (never corrected): empty strings, '.', '..', any separator
    ('/', os.sep, os.altsep), NUL bytes and drive-qualified names.

    Args:
        name: Key, application name or scope.

    Returns:
        str: The name, unchanged.

    Raises:
        InvalidNameError: If the name is not a single safe component.
    """
    if not _is_single_component(name):
        error = InvalidNameError(name)
        logger.error(str(error))
        raise error
    return name


def is_valid_name(name: str) -> bool:
    """Non-raising variant of sanitize_name."""
    return _is_single_component(name)


def _is_single_component(name: str) -> bool:
    if not isinstance(name, str) or not name:
        return False
    if name in (".", ".."):
        return False
    separators = {"/", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    if any(sep in name for sep in separators) or "\x00" in name:
        return False
    # Windows drive prefixes such as 'C:' are not relative components
    if os.path.splitdrive(name)[0]:
        return False
    return True

# -----------------------------------------------------------------------------
# WRITE API
# -----------------------------------------------------------------------------

def atomic_write_bytes(path: PathLike, data: bytes) -> Path:
    """
    Replace a file's content atomically.

    The bytes are written to a temporary file in the destination directory,
    flushed to disk and renamed over the target with os.replace, so a reader
    sees either the previous content or the new one, never a partial file.

    Args:
        path: Destination file. Its parent directory must exist.
        data: Complete new content.

    Returns:
        Path: The destination path.

    Raises:
        FilesystemError: If any step fails; the destination is left untouched.
    """
    target = Path(path)
    tmp_path: Optional[Path] = None
    try:
        with tempfile.NamedTemporaryFile(
                delete=False,
                dir=str(target.parent),
                prefix=f".{target.name}.",
                suffix=".tmp",
        ) as tmp:
            tmp_path = Path(tmp.name)
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp_path, _target_mode(target))
        os.replace(tmp_path, target)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            try:
                tmp_path.unlink()
            except OSError:
                logger.debug(f"Could not remove temporary file {tmp_path}")
        logger.error(f"Atomic write to {target} failed: {e}")
        raise FilesystemError(target, e) from e
    return target


def _target_mode(target: Path) -> int:
    """Permissions for the replacement: keep the current ones, else honour the umask."""
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        # The umask can only be read by setting it
        umask = os.umask(0o022)
        os.umask(umask)
        return 0o666 & ~umask


def atomic_write_text(path: PathLike, text: str, encoding: str = "utf-8") -> Path:
    """Text wrapper around atomic_write_bytes."""
    return atomic_write_bytes(path, text.encode(encoding))


def ensure_dir(path: PathLike) -> Path:
    """
    Create a directory hierarchy if missing (idempotent).

    Raises:
        FilesystemError: If creation fails.
    """
    target = Path(path)
    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Failed to create directory {target}: {e}")
        raise FilesystemError(target, e) from e
    return target
