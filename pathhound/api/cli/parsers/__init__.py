"""Argument parsers for the PathHound CLI."""

import argparse
from typing import Any

from pathhound.version import __version__


def create_main_parser() -> argparse.ArgumentParser:
    """Create the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="pathhound",
        description="Enumerate files under one or more directories",
    )
    parser.add_argument(
        "--version", action="version", version=f"pathhound {__version__}"
    )
    return parser


def setup_subparsers(parser: argparse.ArgumentParser) -> Any:
    """Attach the command subparsers container."""
    return parser.add_subparsers(dest="command", help="Available commands")


__all__: list[str] = ["create_main_parser", "setup_subparsers"]
