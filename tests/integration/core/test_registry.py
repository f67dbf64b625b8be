from __future__ import annotations

"""
Integration tests for the Project Registry Service.

Covers the write-through metadata record, non-clobbering file placement
and substring search over the project directory.
"""

import os
import tomllib
from pathlib import Path

import pytest

from libset.core.registry import Project
from libset.domain.errors import (
    AmbiguousError,
    DeserializeError,
    InvalidNameError,
    NotFoundError,
)
from libset.domain.formats import Format
from libset.domain.project_models import ProjectFile


@pytest.fixture
def project(base_dir: Path) -> Project:
    return Project.open_or_create("com", "example", "App", base_dir=base_dir)

# -----------------------------------------------------------------------------
# METADATA RECORD
# -----------------------------------------------------------------------------

def test_open_or_create_writes_record(base_dir: Path, project: Project) -> None:
    """TC-01: The record '<q>.<o>.<a>.toml' exists right after creation."""
    assert project.path == base_dir / "com.example.App"
    assert project.record_path == base_dir / "com.example.App" / "com.example.App.toml"

    record = tomllib.loads(project.record_path.read_text(encoding="utf-8"))
    assert record["qualifier"] == "com"
    assert record["application"] == "App"
    assert record["author"] == ""


def test_setters_write_through(base_dir: Path, project: Project) -> None:
    """TC-02: Every metadata change is persisted immediately."""
    project.set_author("Ana").set_version("0.3.1")

    record = tomllib.loads(project.record_path.read_text(encoding="utf-8"))
    assert record["author"] == "Ana"
    assert record["version"] == "0.3.1"

    project.set_about("Sample")
    reopened = Project.open("com", "example", "App", base_dir=base_dir)
    assert reopened.metadata.about == "Sample"
    assert reopened.metadata.author == "Ana"


def test_open_missing_project(base_dir: Path) -> None:
    with pytest.raises(NotFoundError):
        Project.open("com", "example", "Missing", base_dir=base_dir)


def test_identity_parts_are_sanitized(base_dir: Path) -> None:
    with pytest.raises(InvalidNameError):
        Project.open_or_create("com", "../evil", "App", base_dir=base_dir)


def test_default_location_uses_data_override(isolated_homes: Path) -> None:
    project = Project.open_or_create("com", "example", "App")
    assert project.path == (isolated_homes / "data").absolute() / "com.example.App"
    assert project.record_path.is_file()

# -----------------------------------------------------------------------------
# FILES
# -----------------------------------------------------------------------------

def test_add_files_never_clobbers(project: Project) -> None:
    """TC-03: Existing files keep their content; missing ones are created."""
    existing = project.path / "settings.json"
    existing.write_text('{"user": true}', encoding="utf-8")

    project.add_files([
        ProjectFile("settings", Format.JSON).set_content({"user": False}),
        ProjectFile("keys", Format.TOML).set_content({"save": "ctrl+s"}),
        ProjectFile("readme", Format.PLAIN).set_text("hello"),
    ])

    assert existing.read_text(encoding="utf-8") == '{"user": true}'
    assert tomllib.loads((project.path / "keys.toml").read_text(encoding="utf-8")) == {"save": "ctrl+s"}
    assert (project.path / "readme").read_text(encoding="utf-8") == "hello"


def test_find_by_substring_and_format(project: Project) -> None:
    project.add_files([
        ProjectFile("theme-dark", Format.RON).set_content({"accent": "#000"}),
        ProjectFile("theme-light", Format.JSON).set_content({"accent": "#fff"}),
        ProjectFile("theme-notes", Format.PLAIN).set_text("not searchable"),
    ])

    found = project.find("theme")
    assert [f.name for f in found] == ["theme-dark", "theme-light"]
    assert [f.file_name for f in found] == ["theme-dark.ron", "theme-light.json"]

    only_json = project.find("theme", Format.JSON)
    assert [f.file_name for f in only_json] == ["theme-light.json"]
    assert only_json[0].format is Format.JSON
    assert '"#fff"' in only_json[0].content


def test_find_descends_subdirectories(project: Project) -> None:
    nested = project.path / "profiles" / "work"
    nested.mkdir(parents=True)
    (nested / "profile.toml").write_text('name = "work"\n', encoding="utf-8")

    found = project.find("profile")
    assert len(found) == 1
    assert found[0].path == nested / "profile.toml"


def test_record_is_searchable(project: Project) -> None:
    record = project.get_file("com.example", Format.TOML)
    assert record.path == project.record_path


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_find_follows_directory_links(project: Project, tmp_path: Path) -> None:
    shared = tmp_path / "shared"
    shared.mkdir()
    (shared / "linked.json").write_text("{}", encoding="utf-8")
    try:
        os.symlink(shared, project.path / "shared", target_is_directory=True)
    except OSError:
        pytest.skip("symlink creation not permitted")

    assert [f.file_name for f in project.find("linked")] == ["linked.json"]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_find_stops_at_link_loops(project: Project) -> None:
    try:
        os.symlink(project.path, project.path / "loop", target_is_directory=True)
    except OSError:
        pytest.skip("symlink creation not permitted")

    assert len(project.find("com.example")) == 1
    assert project.get_file("com.example", Format.TOML).path == project.record_path


def test_find_non_utf8_file_raises(project: Project) -> None:
    (project.path / "blob.json").write_bytes(b"\xff\xfe\x00")

    with pytest.raises(DeserializeError) as exc_info:
        project.find("blob")
    assert exc_info.value.format is Format.JSON


def test_found_files_can_be_added_elsewhere(base_dir: Path, project: Project) -> None:
    project.add_files([ProjectFile("keys", Format.TOML).set_content({"save": "ctrl+s"})])
    found = project.get_file("keys", Format.TOML)
    assert found.name == "keys"
    assert found.file_name == "keys.toml"

    other = Project.open_or_create("com", "example", "Other", base_dir=base_dir)
    other.add_files([found])

    assert found.path == other.path / "keys.toml"
    assert not (other.path / "keys.toml.toml").exists()
    assert tomllib.loads(found.path.read_text(encoding="utf-8")) == {"save": "ctrl+s"}


def test_get_file_requires_exactly_one_match(project: Project) -> None:
    project.add_files([
        ProjectFile("colors", Format.JSON).set_content({}),
        ProjectFile("colors-alt", Format.JSON).set_content({}),
    ])

    with pytest.raises(AmbiguousError) as exc_info:
        project.get_file("colors", Format.JSON)
    assert len(exc_info.value.matches) == 2

    assert project.get_file("colors-alt", Format.JSON).name == "colors-alt"

    with pytest.raises(NotFoundError):
        project.get_file("colors", Format.RON)


def test_clear_removes_project_directory(project: Project) -> None:
    project.add_files([ProjectFile("a", Format.JSON).set_content({})])

    project.clear()

    assert not project.path.exists()
    project.clear()
