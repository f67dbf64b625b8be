from __future__ import annotations

"""
Domain Constants.

Centralizes the well-known file names, default formats and environment
overrides shared by the resolver, the store and the registry.
"""

from libset.domain.formats import Format

# -----------------------------------------------------------------------------
# ENVIRONMENT OVERRIDES
# -----------------------------------------------------------------------------
# Checked before platformdirs; useful for sandboxes, CI and portable installs.
CONFIG_HOME_ENV = "LIBSET_CONFIG_HOME"
DATA_HOME_ENV = "LIBSET_DATA_HOME"

# -----------------------------------------------------------------------------
# ON-DISK LAYOUT
# -----------------------------------------------------------------------------
APP_DESCRIPTION_STEM = "app"
DEFAULT_DESCRIPTION_FORMAT = Format.TOML
VERSION_DIR_PREFIX = "v"
PROJECT_RECORD_FORMAT = Format.TOML

# Formats searched by the registry when no explicit format is requested
SEARCHABLE_FORMATS = (Format.TOML, Format.JSON, Format.RON)

# -----------------------------------------------------------------------------
# CLI DEFAULTS
# -----------------------------------------------------------------------------
DEFAULT_CLI_FORMAT = Format.JSON
DEFAULT_CLI_VERSION = 1
LOG_DIR_NAME = "logs"
LOG_FILE_NAME = "libset.log"
