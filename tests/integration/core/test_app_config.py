from __future__ import annotations

"""
Integration tests for the Application Configuration Root.

Verifies layout materialization, the self-description file and
re-derivation of a written configuration from the application name.
"""

import tomllib
from pathlib import Path

import pytest

from libset.core.tree.app_config import AppConfig
from libset.domain.element import new_directory, new_file
from libset.domain.errors import InvalidNameError
from libset.domain.formats import Format


def _configured(base_dir: Path, fmt: Format = Format.TOML) -> AppConfig:
    config = AppConfig("demo", base_dir=base_dir, description_format=fmt)
    config.set_author("Ana").set_version("1.2.0").set_about("Demo app")

    themes = new_directory("themes")
    themes.add_child(new_file("dark.ron", Format.RON, {"accent": "#000"}))
    config.add(themes).add(new_file("settings.json", Format.JSON, {"lang": "en"}))
    return config


def test_new_config_layout(base_dir: Path) -> None:
    """TC-01: The root resolves under the base dir and starts with 'app.toml'."""
    config = AppConfig("demo", base_dir=base_dir)

    assert config.path == base_dir / "demo"
    assert config.root.path == base_dir / "demo"
    assert [e.name for e in config.elements] == ["app.toml"]
    assert config.description_path == base_dir / "demo" / "app.toml"
    assert not config.is_written()


def test_default_base_dir_is_platform_data_dir(isolated_homes: Path) -> None:
    config = AppConfig("demo")
    assert config.path == (isolated_homes / "data").absolute() / "demo"


def test_invalid_name_rejected(base_dir: Path) -> None:
    with pytest.raises(InvalidNameError):
        AppConfig("../demo", base_dir=base_dir)


def test_plain_description_rejected(base_dir: Path) -> None:
    with pytest.raises(ValueError):
        AppConfig("demo", base_dir=base_dir, description_format=Format.PLAIN)


def test_write_materializes_tree_and_description(tmp_path: Path) -> None:
    """TC-02: write() creates a missing base dir, the tree and the description."""
    base = tmp_path / "not-yet"
    config = _configured(base).write()

    assert (base / "demo" / "themes" / "dark.ron").is_file()
    assert (base / "demo" / "settings.json").is_file()

    described = tomllib.loads((base / "demo" / "app.toml").read_text(encoding="utf-8"))
    assert described["name"] == "demo"
    assert described["author"] == "Ana"
    assert described["version"] == "1.2.0"
    assert [e["name"] for e in described["elements"]] == ["app.toml", "themes", "settings.json"]
    assert config.is_written()


@pytest.mark.parametrize("fmt", [Format.TOML, Format.JSON, Format.RON])
def test_current_rederives_structure(base_dir: Path, fmt: Format) -> None:
    """TC-03: current() rebuilds metadata and element paths from disk."""
    _configured(base_dir, fmt).write()

    restored = AppConfig.current("demo", base_dir=base_dir, description_format=fmt)

    assert restored is not None
    assert restored.author == "Ana"
    assert restored.about == "Demo app"
    themes = restored.root.find("themes")
    assert themes is not None and themes.is_dir
    dark = restored.root.find("dark.ron")
    assert dark.path == base_dir / "demo" / "themes" / "dark.ron"
    assert dark.format is Format.RON
    # Content is not part of the description
    assert dark.content is None


def test_current_returns_none_when_not_written(base_dir: Path) -> None:
    assert AppConfig.current("demo", base_dir=base_dir) is None


def test_current_returns_none_on_corrupt_description(base_dir: Path) -> None:
    (base_dir / "demo").mkdir()
    (base_dir / "demo" / "app.toml").write_text("= not toml", encoding="utf-8")

    assert AppConfig.current("demo", base_dir=base_dir) is None


def test_current_returns_none_on_malformed_elements(base_dir: Path) -> None:
    (base_dir / "demo").mkdir()
    (base_dir / "demo" / "app.toml").write_text(
        'name = "demo"\n[[elements]]\nname = "x"\nkind = "socket"\n', encoding="utf-8"
    )

    assert AppConfig.current("demo", base_dir=base_dir) is None


def test_rewrite_refreshes_default_files(base_dir: Path) -> None:
    config = _configured(base_dir).write()
    settings = base_dir / "demo" / "settings.json"
    settings.write_text("{}", encoding="utf-8")

    config.write()

    assert '"lang": "en"' in settings.read_text(encoding="utf-8")


def test_clear_removes_everything(base_dir: Path) -> None:
    config = _configured(base_dir).write()

    config.clear()

    assert not config.path.exists()
    assert not config.is_written()
    config.clear()
