from __future__ import annotations

from .service import convert, deserialize, extension, serialize

__all__ = [
    "serialize",
    "deserialize",
    "extension",
    "convert",
]
