from __future__ import annotations

"""
CLI Logging Settings.

libset is a library first: it never configures logging on import. The
'libset' command builds one of these settings objects from its global
flags and hands it to configure_logging(). Console output goes to stderr
in a compact 'libset: LEVEL: message' shape so it never mixes with the
values printed on stdout.
"""

import logging
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LoggingConfig:
    """
    Immutable settings for the logging subsystem.

    Attributes:
        level: Severity name ('DEBUG', 'warning'...); unknown names mean INFO.
        console: Emit records on stderr.
        log_file: Optional path of a rotating log file.
        rotate_bytes: Size that triggers a rotation of the log file.
        keep_rotated: Rotated segments kept next to the active file.
        console_format: Layout of stderr lines.
        file_format: Layout of log file lines.
    """
    level: str = "WARNING"
    console: bool = True
    log_file: Optional[str] = None

    rotate_bytes: int = 256 * 1024
    keep_rotated: int = 2

    console_format: str = "libset: %(levelname)s: %(message)s"
    file_format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

    @classmethod
    def for_cli(cls, debug: bool = False, log_file: Optional[str] = None) -> "LoggingConfig":
        """Settings for one command run: warnings only, everything with --debug."""
        return cls(level="DEBUG" if debug else "WARNING", console=True, log_file=log_file)

    @property
    def level_number(self) -> int:
        if not self.level:
            return logging.INFO
        return logging.getLevelNamesMapping().get(str(self.level).strip().upper(), logging.INFO)

