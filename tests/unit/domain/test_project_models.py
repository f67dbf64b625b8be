from __future__ import annotations

"""
Unit tests for the project registry data models.
"""

import json
from pathlib import Path

import pytest

from libset.domain.errors import SerializeError
from libset.domain.formats import Format
from libset.domain.project_models import ProjectFile, ProjectMetadata


def test_metadata_record_name_and_roundtrip() -> None:
    meta = ProjectMetadata("com", "example", "App", author="Ana")

    assert meta.record_name == "com.example.App"
    assert ProjectMetadata.from_dict(meta.to_dict()) == meta


def test_metadata_from_partial_dict_uses_defaults() -> None:
    meta = ProjectMetadata.from_dict({"qualifier": "org", "organization": "o", "application": "a"})
    assert meta.author == ""
    assert meta.about == ""


def test_file_name_follows_format() -> None:
    file = ProjectFile("settings")
    assert file.file_name == "settings.toml"
    assert file.set_format(Format.JSON).file_name == "settings.json"
    assert file.set_format(Format.PLAIN).file_name == "settings"


def test_set_content_serializes_structured_value() -> None:
    file = ProjectFile("settings", Format.JSON).set_content({"theme": "dark"})
    assert json.loads(file.content) == {"theme": "dark"}


def test_set_content_rejected_for_plain() -> None:
    with pytest.raises(SerializeError):
        ProjectFile("notes", Format.PLAIN).set_content({"a": 1})


def test_set_text_rejected_for_structured() -> None:
    with pytest.raises(SerializeError):
        ProjectFile("settings", Format.TOML).set_text("a = 1")


def test_write_requires_path(tmp_path: Path) -> None:
    file = ProjectFile("notes", Format.PLAIN).set_text("hello")
    with pytest.raises(ValueError):
        file.write()

    file.path = tmp_path / "notes"
    file.write()
    assert (tmp_path / "notes").read_text(encoding="utf-8") == "hello"
