from __future__ import annotations

"""
Format Codec Service.

Dispatches serialization and deserialization through a table keyed by
the Format tag. Structured formats share the same contract: value in,
UTF-8 bytes out (and back). Plain text never goes through the typed
path in reverse; it is read through the store's plain accessor.
"""

import dataclasses
import json
import logging
import tomllib
import typing
from typing import Any, Callable, Dict, Optional, Type, TypeVar

import tomli_w

from libset.core.codec import ron
from libset.domain.errors import DeserializeError, SerializeError
from libset.domain.formats import Format

logger = logging.getLogger(__name__)

T = TypeVar("T")

# -----------------------------------------------------------------------------
# FORMAT BACKENDS
# -----------------------------------------------------------------------------

def _dump_plain(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(
            f"plain format only stores text, got {type(value).__name__}"
        )
    return value


def _dump_toml(value: Any) -> str:
    if not isinstance(value, dict):
        raise TypeError(
            f"TOML documents must be tables, got {type(value).__name__}"
        )
    return tomli_w.dumps(value)


def _dump_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, indent=4)


def _load_plain(text: str) -> Any:
    raise TypeError("plain values are read as raw text with get_plain()")


_DUMPERS: Dict[Format, Callable[[Any], str]] = {
    Format.PLAIN: _dump_plain,
    Format.TOML: _dump_toml,
    Format.JSON: _dump_json,
    Format.RON: ron.dumps,
}

_LOADERS: Dict[Format, Callable[[str], Any]] = {
    Format.PLAIN: _load_plain,
    Format.TOML: tomllib.loads,
    Format.JSON: json.loads,
    Format.RON: ron.loads,
}

# ==============================================================================
# PUBLIC API
# ==============================================================================

def serialize(value: Any, fmt: Format) -> bytes:
    """
    Encode a value in the given format.

    Dataclass instances are flattened with dataclasses.asdict, except for
    RON which writes them as named structs.

    Args:
        value: Text (plain) or any structurally serializable value.
        fmt: Target format.

    Returns:
        bytes: UTF-8 encoded document.

    Raises:
        SerializeError: If the value cannot be represented in the format.
    """
    if fmt is not Format.RON and _is_dataclass_instance(value):
        value = dataclasses.asdict(value)

    try:
        text = _DUMPERS[fmt](value)
    except (TypeError, ValueError) as e:
        logger.error(f"Serialization to {fmt.label} failed: {e}")
        raise SerializeError(fmt, e) from e
    return text.encode("utf-8")


def deserialize(data: bytes | str, fmt: Format, into: Optional[Type[T]] = None) -> Any:
    """
    Decode a stored document.

    Args:
        data: Raw file content.
        fmt: Source format (plain is rejected).
        into: Optional dataclass type to build from the decoded mapping.

    Returns:
        Any: Decoded value, or an instance of 'into'.

    Raises:
        DeserializeError: On parse errors, plain format, or shape mismatch.
    """
    try:
        text = data.decode("utf-8") if isinstance(data, bytes) else data
        value = _LOADERS[fmt](text)
    except (TypeError, ValueError) as e:
        # tomllib.TOMLDecodeError, json.JSONDecodeError, ron.RonDecodeError
        # and UnicodeDecodeError are all ValueError subclasses
        raise DeserializeError(fmt, e) from e

    if into is None:
        return value
    return convert(value, into, fmt)


def extension(fmt: Format) -> str:
    """Return the file extension of a format ('' for plain)."""
    return fmt.extension


def convert(value: Any, into: Type[T], fmt: Format = Format.JSON) -> T:
    """
    Build a dataclass instance from a decoded mapping.

    Nested dataclass fields (and lists of dataclasses) are converted
    recursively; other field types are passed through as decoded.

    Raises:
        DeserializeError: If the mapping does not fit the dataclass.
    """
    if not dataclasses.is_dataclass(into):
        if isinstance(into, type) and isinstance(value, into):
            return value
        raise DeserializeError(
            fmt, f"expected {into.__name__}, found {type(value).__name__}"
        )
    if not isinstance(value, dict):
        raise DeserializeError(
            fmt, f"expected a mapping for {into.__name__}, found {type(value).__name__}"
        )

    hints = typing.get_type_hints(into)
    kwargs: Dict[str, Any] = {}
    for f in dataclasses.fields(into):
        if f.name not in value:
            continue
        kwargs[f.name] = _convert_field(value[f.name], hints.get(f.name), fmt)

    try:
        return into(**kwargs)
    except TypeError as e:
        raise DeserializeError(fmt, e) from e

# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _is_dataclass_instance(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _convert_field(raw: Any, hint: Any, fmt: Format) -> Any:
    if hint is None:
        return raw
    if dataclasses.is_dataclass(hint) and isinstance(raw, dict):
        return convert(raw, hint, fmt)

    origin = typing.get_origin(hint)
    args = typing.get_args(hint)
    if origin in (list, typing.List) and args and isinstance(raw, list):
        return [_convert_field(item, args[0], fmt) for item in raw]
    if origin is typing.Union and args:
        # Optional[Nested] and friends: first dataclass member that fits
        for arg in args:
            if dataclasses.is_dataclass(arg) and isinstance(raw, dict):
                return convert(raw, arg, fmt)
    return raw
