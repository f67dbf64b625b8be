from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: argument parsing, logging bootstrap,
store resolution and dispatch of the selected command. Library errors
are reported on stderr and mapped to a non-zero exit code.
"""

import argparse
import sys
from typing import Callable, Dict, List, Optional

from libset.core.codec import deserialize, serialize
from libset.core.store import Store
from libset.domain.errors import LibsetError
from libset.domain.formats import Format
from libset.infra.logging import LoggingConfig, configure_logging, get_logger
from libset.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute one CLI command.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: 0 on success, 1 on library errors (or a missing key for 'has').
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    configure_logging(LoggingConfig.for_cli(args.debug, args.log_file))
    logger.debug(f"CLI command '{args.command}' for application '{args.app}'")

    handler = _COMMANDS[args.command]
    try:
        store = Store.open(args.app, args.version, args.scope, base_dir=args.base_dir)
        return handler(store, args)
    except LibsetError as e:
        logger.error(str(e))
        sys.stderr.write(f"libset: {e}\n")
        return 1

# -----------------------------------------------------------------------------
# COMMAND HANDLERS
# -----------------------------------------------------------------------------

def _cmd_set(store: Store, args: argparse.Namespace) -> int:
    fmt = cli_args.selected_format(args)
    if fmt is Format.PLAIN:
        store.set_plain(args.key, args.value)
    else:
        store.set(args.key, fmt, deserialize(args.value, fmt))
    return 0


def _cmd_get(store: Store, args: argparse.Namespace) -> int:
    fmt = cli_args.selected_format(args)
    if fmt is Format.PLAIN:
        text = store.get_plain(args.key)
    else:
        text = serialize(store.get(args.key, fmt), fmt).decode("utf-8")
    sys.stdout.write(text if text.endswith("\n") else text + "\n")
    return 0


def _cmd_has(store: Store, args: argparse.Namespace) -> int:
    found = store.has(args.key, cli_args.selected_format(args))
    print("true" if found else "false")
    return 0 if found else 1


def _cmd_path(store: Store, args: argparse.Namespace) -> int:
    print(store.path(args.key, cli_args.selected_format(args)))
    return 0


def _cmd_rm(store: Store, args: argparse.Namespace) -> int:
    store.remove(args.key, cli_args.selected_format(args))
    return 0


def _cmd_clean(store: Store, args: argparse.Namespace) -> int:
    store.clean()
    return 0


_COMMANDS: Dict[str, Callable[[Store, argparse.Namespace], int]] = {
    "set": _cmd_set,
    "get": _cmd_get,
    "has": _cmd_has,
    "path": _cmd_path,
    "rm": _cmd_rm,
    "clean": _cmd_clean,
}
