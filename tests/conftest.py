from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Isolation of the platform directories so no test touches the real
   user configuration or data folders.
"""

import os
import sys
from pathlib import Path

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def isolated_homes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Point the config and data overrides at a per-test sandbox.

    Returns:
        Path: Sandbox root holding 'config' and 'data'.
    """
    sandbox = tmp_path / "homes"
    monkeypatch.setenv("LIBSET_CONFIG_HOME", str(sandbox / "config"))
    monkeypatch.setenv("LIBSET_DATA_HOME", str(sandbox / "data"))
    return sandbox


@pytest.fixture
def base_dir(tmp_path: Path) -> Path:
    """Existing empty directory used as an explicit base for stores and trees."""
    target = tmp_path / "base"
    target.mkdir()
    return target
