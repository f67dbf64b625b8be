from __future__ import annotations

"""
Integration tests for Logging Infrastructure.

Verifies the QueueListener architecture, idempotent configuration,
handler ownership tagging and log file rotation.
"""

import logging
import time
from logging.handlers import QueueListener
from pathlib import Path
from unittest.mock import patch

import pytest

from libset.infra.logging import (
    _CONFIGURED_FLAG_ATTR,
    _HANDLER_TAG_ATTR,
    _QUEUE_LISTENER_ATTR,
    LoggingConfig,
    configure_logging,
    get_default_log_path,
    get_logger,
)


@pytest.fixture(autouse=True)
def reset_logging():
    """Clean up root logger state before and after each test."""
    _reset_root()
    yield
    _reset_root()


def _reset_root() -> None:
    root = logging.getLogger()

    listener = getattr(root, _QUEUE_LISTENER_ATTR, None)
    if listener and isinstance(listener, QueueListener) and getattr(listener, "_thread", None):
        listener.stop()
    setattr(root, _QUEUE_LISTENER_ATTR, None)

    for h in list(root.handlers):
        if getattr(h, _HANDLER_TAG_ATTR, False):
            root.removeHandler(h)
            h.close()

    if hasattr(root, _CONFIGURED_FLAG_ATTR):
        delattr(root, _CONFIGURED_FLAG_ATTR)


def test_logging_idempotency() -> None:
    """TC-01: Repeated configuration does not duplicate handlers."""
    cfg = LoggingConfig(level="INFO", console=True)

    configure_logging(cfg)
    root = logging.getLogger()
    initial_handler_count = len(root.handlers)

    configure_logging(cfg)
    assert len(root.handlers) == initial_handler_count, "Handlers were duplicated."


def test_force_replaces_previous_listener() -> None:
    configure_logging(LoggingConfig(level="INFO", console=True))
    root = logging.getLogger()
    first = getattr(root, _QUEUE_LISTENER_ATTR)

    configure_logging(LoggingConfig(level="DEBUG", console=True), force=True)

    assert getattr(root, _QUEUE_LISTENER_ATTR) is not first
    assert root.level == logging.DEBUG
    assert len([h for h in root.handlers if getattr(h, _HANDLER_TAG_ATTR, False)]) == 1


def test_log_rotation(tmp_path: Path) -> None:
    """TC-02: The file handler rotates once the size limit is exceeded."""
    log_file = tmp_path / "logs" / "test_rotate.log"
    cfg = LoggingConfig(
        level="DEBUG",
        console=False,
        log_file=str(log_file),
        rotate_bytes=100,
        keep_rotated=1,
    )

    configure_logging(cfg)
    logger = get_logger("test_rotate")

    for _ in range(10):
        logger.debug("This is a long log message to trigger rotation." * 5)

    # Give the QueueListener time to drain
    time.sleep(0.5)

    assert log_file.exists()
    assert (tmp_path / "logs" / "test_rotate.log.1").exists(), "Rotation backup file was not created."


def test_queue_listener_architecture() -> None:
    """TC-03: The root logger uses a tagged QueueHandler and a live listener."""
    configure_logging(LoggingConfig(level="INFO", console=True))

    root = logging.getLogger()
    tagged = [h for h in root.handlers if getattr(h, _HANDLER_TAG_ATTR, False)]

    assert len(tagged) == 1
    assert getattr(root, _QUEUE_LISTENER_ATTR) is not None


def test_foreign_handlers_survive_reconfiguration() -> None:
    root = logging.getLogger()
    foreign = logging.NullHandler()
    root.addHandler(foreign)
    try:
        configure_logging(LoggingConfig(console=True))
        configure_logging(LoggingConfig(console=True), force=True)
        assert foreign in root.handlers
    finally:
        root.removeHandler(foreign)


def test_no_sinks_installs_nothing() -> None:
    configure_logging(LoggingConfig(console=False, log_file=None))

    root = logging.getLogger()
    assert not [h for h in root.handlers if getattr(h, _HANDLER_TAG_ATTR, False)]
    assert getattr(root, _CONFIGURED_FLAG_ATTR) is True


def test_unknown_level_falls_back_to_info() -> None:
    configure_logging(LoggingConfig(level="chatty", console=True))
    assert logging.getLogger().level == logging.INFO


def test_default_log_path_under_data_home(isolated_homes: Path) -> None:
    path = get_default_log_path()
    assert path == (isolated_homes / "data").absolute() / "libset" / "logs" / "libset.log"


def test_listener_failure_falls_back_to_console() -> None:
    with patch.object(QueueListener, "start", side_effect=RuntimeError("no threads")):
        configure_logging(LoggingConfig(console=True))

    root = logging.getLogger()
    tagged = [h for h in root.handlers if getattr(h, _HANDLER_TAG_ATTR, False)]
    assert len(tagged) == 1
    assert isinstance(tagged[0], logging.StreamHandler)
    assert getattr(root, _QUEUE_LISTENER_ATTR, None) is None


def test_cli_settings_follow_debug_flag() -> None:
    quiet = LoggingConfig.for_cli()
    verbose = LoggingConfig.for_cli(debug=True, log_file="/tmp/libset.log")

    assert quiet.level_number == logging.WARNING
    assert quiet.log_file is None
    assert verbose.level_number == logging.DEBUG
    assert verbose.log_file == "/tmp/libset.log"
    assert quiet.console_format.startswith("libset: ")


@pytest.mark.parametrize(
    "level, expected",
    [("debug", logging.DEBUG), (" Error ", logging.ERROR), ("WARN", logging.WARNING), ("", logging.INFO)],
)
def test_level_names_resolve(level: str, expected: int) -> None:
    assert LoggingConfig(level=level).level_number == expected
