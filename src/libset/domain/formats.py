from __future__ import annotations

"""
Serialization Format Tags.

Declares the closed set of on-disk formats understood by the codec and
their associated file extensions.
"""

from enum import Enum


class Format(Enum):
    """
    Tagged serialization scheme.

    The enum value is the file extension used on disk (empty for plain
    text, which is stored under the bare key).
    """
    PLAIN = ""
    TOML = "toml"
    JSON = "json"
    RON = "ron"

    @property
    def extension(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        """Human readable name used in messages ('json', 'plain'...)."""
        return self.name.lower()

    @property
    def is_structured(self) -> bool:
        return self is not Format.PLAIN

    def file_name(self, stem: str) -> str:
        """Append this format's extension to a stem, if it has one."""
        if not self.value:
            return stem
        return f"{stem}.{self.value}"

    @classmethod
    def parse(cls, name: str) -> "Format":
        """
        Resolve a format from a case-insensitive label or extension.

        Raises:
            ValueError: If the label does not name a known format.
        """
        key = (name or "").strip().lower().lstrip(".")
        for fmt in cls:
            if key in (fmt.label, fmt.value) and (key or fmt is cls.PLAIN):
                return fmt
        raise ValueError(f"Unknown format '{name}'.")

    @classmethod
    def from_extension(cls, file_name: str) -> "Format":
        """Infer the format of a file from its suffix; unknown suffixes are plain."""
        _, dot, suffix = file_name.rpartition(".")
        if not dot:
            return cls.PLAIN
        for fmt in cls:
            if fmt.value and fmt.value == suffix.lower():
                return fmt
        return cls.PLAIN


def extension(fmt: Format) -> str:
    """Return the file extension for ``fmt`` ('' for plain text)."""
    return fmt.extension
