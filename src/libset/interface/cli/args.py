from __future__ import annotations

"""
CLI Argument Definition.

Declares the 'libset' command schema: one sub-command per store
operation, sharing the options that identify the store (application,
version, scope, base directory) and the value format.
"""

import argparse
from typing import List

from libset.domain.constants import DEFAULT_CLI_FORMAT, DEFAULT_CLI_VERSION
from libset.domain.formats import Format

FORMAT_CHOICES: List[str] = [fmt.label for fmt in Format]

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the libset CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="libset",
        description="Read and write versioned application settings files.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write logs to this rotating file.",
    )

    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    # --- Store identity shared by every command ---
    store_opts = argparse.ArgumentParser(add_help=False)
    store_opts.add_argument("app", help="Application name, e.g. org.example.Demo.")
    store_opts.add_argument(
        "--version",
        dest="version",
        type=int,
        default=DEFAULT_CLI_VERSION,
        help=f"Configuration version (default: {DEFAULT_CLI_VERSION}).",
    )
    store_opts.add_argument(
        "--scope",
        dest="scope",
        default=None,
        help="Optional sub-namespace inside the versioned directory.",
    )
    store_opts.add_argument(
        "--base-dir",
        dest="base_dir",
        default=None,
        help="Use this directory instead of the platform config directory.",
    )

    key_opts = argparse.ArgumentParser(add_help=False)
    key_opts.add_argument("key", help="Settings key (file name without extension).")
    key_opts.add_argument(
        "-f", "--format",
        dest="format",
        choices=FORMAT_CHOICES,
        default=DEFAULT_CLI_FORMAT.label,
        help=f"Value format (default: {DEFAULT_CLI_FORMAT.label}).",
    )

    p_set = sub.add_parser("set", parents=[store_opts, key_opts], help="Store a value.")
    p_set.add_argument("value", help="Document text in the chosen format (raw text for plain).")

    sub.add_parser("get", parents=[store_opts, key_opts], help="Print a stored value.")
    sub.add_parser("has", parents=[store_opts, key_opts], help="Exit 0 if the key exists, 1 otherwise.")
    sub.add_parser("path", parents=[store_opts, key_opts], help="Print the file backing a key.")
    sub.add_parser("rm", parents=[store_opts, key_opts], help="Delete a stored key.")
    sub.add_parser("clean", parents=[store_opts], help="Delete the whole store directory.")

    return p


def selected_format(args: argparse.Namespace) -> Format:
    """Resolve the --format choice into a Format."""
    return Format.parse(getattr(args, "format", DEFAULT_CLI_FORMAT.label))
