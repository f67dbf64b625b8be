from __future__ import annotations

"""
Unit tests for the Format tags.
"""

import pytest

from libset.domain.formats import Format, extension


def test_extensions() -> None:
    assert extension(Format.TOML) == "toml"
    assert extension(Format.JSON) == "json"
    assert extension(Format.RON) == "ron"
    assert extension(Format.PLAIN) == ""


def test_file_name_appends_extension_except_plain() -> None:
    assert Format.JSON.file_name("colors") == "colors.json"
    assert Format.PLAIN.file_name("token") == "token"


@pytest.mark.parametrize(
    "label, expected",
    [
        ("json", Format.JSON),
        ("TOML", Format.TOML),
        (".ron", Format.RON),
        ("plain", Format.PLAIN),
        ("", Format.PLAIN),
    ],
)
def test_parse_labels(label: str, expected: Format) -> None:
    assert Format.parse(label) is expected


def test_parse_unknown_label() -> None:
    with pytest.raises(ValueError):
        Format.parse("yaml")


def test_from_extension() -> None:
    assert Format.from_extension("settings.toml") is Format.TOML
    assert Format.from_extension("archive.tar.JSON") is Format.JSON
    assert Format.from_extension("README") is Format.PLAIN
    assert Format.from_extension("notes.txt") is Format.PLAIN


def test_structured_flag() -> None:
    assert not Format.PLAIN.is_structured
    assert all(fmt.is_structured for fmt in (Format.TOML, Format.JSON, Format.RON))
