"""Module entrypoint for running marmtool CLI commands.

Usage: python -m marmtool <command> [options]
"""

from __future__ import annotations

import sys
from typing import Optional

from tools.cli.buy import main as buy_main


def print_usage() -> None:
    """Print CLI usage information."""
    print("marmtool - marmalade marketplace tooling")
    print("")
    print("Usage: marmtool <command> [options]")
    print("       python -m marmtool <command> [options]")
    print("")
    print("Commands:")
    print("  buy               Build unsigned buy SigData for a sale")
    print("")
    print("Options:")
    print("  -h, --help        Show this help message")
    print("  --version         Show version information")
    print("")
    print("Examples:")
    print("  marmtool buy --sale-id <id> --buyer k:<key> --buyer-key <key> \\")
    print("      --gas-payer k:<key> --gas-payer-key <key>")


def print_version() -> None:
    """Print version information."""
    from marmtool import __version__
    print(f"marmtool {__version__}")


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entrypoint."""
    if argv is None:
        argv = sys.argv[1:]

    if len(argv) < 1:
        print_usage()
        return 1

    command = argv[0]

    if command in ("-h", "--help"):
        print_usage()
        return 0

    if command in ("-v", "--version"):
        print_version()
        return 0

    if command == "buy":
        return buy_main(argv[1:])

    print(f"Unknown command: {command}")
    print_usage()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
