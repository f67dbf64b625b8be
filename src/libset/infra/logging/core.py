from __future__ import annotations

"""
Logging Core.

Idempotent setup of the root logger for the command-line entry point.
Records go through a QueueHandler and are emitted by a QueueListener
thread, so file I/O for logs never competes with the store's own writes.
The library modules only create named loggers; they never call this.
"""

import atexit
import logging
import queue
import sys
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from typing import List, Optional

from libset.domain.constants import LOG_DIR_NAME, LOG_FILE_NAME
from libset.infra.fs import resolve_data_dir
from libset.infra.logging.config import LoggingConfig
from libset.infra.logging.handlers import (
    _create_console_handler,
    _create_rotating_file_handler,
    _is_our_handler,
    _tag_handler,
)

_CONFIGURED_FLAG_ATTR: str = "_libset_configured"
_QUEUE_LISTENER_ATTR: str = "_libset_queue_listener"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def get_default_log_path() -> Path:
    """Default log location: '<user data dir>/libset/logs/libset.log'."""
    return resolve_data_dir() / "libset" / LOG_DIR_NAME / LOG_FILE_NAME


def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Configure the root logger once.

    A second call is a no-op unless 'force' is set, in which case the
    handlers and listener installed by the previous call are replaced.

    Args:
        cfg: Logging settings.
        force: Re-initialize even if already configured.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()

    if getattr(root, _CONFIGURED_FLAG_ATTR, False) and not force:
        return root

    level_int = cfg.level_number
    root.setLevel(level_int)

    _remove_our_handlers(root)
    _stop_existing_listener(root)

    handlers: List[logging.Handler] = []
    if cfg.console:
        handlers.append(_create_console_handler(level_int, logging.Formatter(cfg.console_format)))
    if cfg.log_file:
        fh = _create_rotating_file_handler(
            cfg.log_file,
            level_int,
            logging.Formatter(cfg.file_format),
            cfg.rotate_bytes,
            cfg.keep_rotated,
        )
        if fh is not None:
            handlers.append(fh)

    if not handlers:
        setattr(root, _CONFIGURED_FLAG_ATTR, True)
        return root

    log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)
    queue_handler = _tag_handler(QueueHandler(log_queue))
    listener = QueueListener(log_queue, *handlers, respect_handler_level=True)
    try:
        listener.start()
    except RuntimeError as e:
        # No listener thread: log synchronously to stderr instead
        for h in handlers:
            h.close()
        return _install_emergency_console(root, e)

    root.addHandler(queue_handler)
    setattr(root, _QUEUE_LISTENER_ATTR, listener)
    setattr(root, _CONFIGURED_FLAG_ATTR, True)

    # Flush pending records on interpreter shutdown
    atexit.register(_safe_stop_listener, listener)
    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _install_emergency_console(root: logging.Logger, cause: BaseException) -> logging.Logger:
    sh = logging.StreamHandler(sys.stderr)
    sh.setFormatter(logging.Formatter("CRITICAL FALLBACK | %(levelname)s | %(message)s"))
    root.addHandler(_tag_handler(sh))
    setattr(root, _CONFIGURED_FLAG_ATTR, True)
    root.warning(f"Log listener unavailable ({cause}). Switched to emergency console.")
    return root


def _remove_our_handlers(root: logging.Logger) -> None:
    for h in list(root.handlers):
        if _is_our_handler(h):
            root.removeHandler(h)
            h.close()


def _stop_existing_listener(root: logging.Logger) -> None:
    listener = getattr(root, _QUEUE_LISTENER_ATTR, None)
    if listener is not None:
        _safe_stop_listener(listener)
        setattr(root, _QUEUE_LISTENER_ATTR, None)


def _safe_stop_listener(listener: Optional[QueueListener]) -> None:
    """Stop a listener; a second stop (atexit after a reset) is ignored."""
    if listener is None:
        return
    if getattr(listener, "_thread", None) is not None:
        try:
            listener.stop()
        except RuntimeError as e:
            sys.stderr.write(f"WARNING: log listener shutdown failed: {e}\n")
