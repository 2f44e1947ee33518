"""List command argument parser for PathHound CLI."""

import argparse
from pathlib import Path
from typing import Any, cast

from pathhound.core.config.loading_config import LoadingConfig


def add_list_subparser(subparsers: Any) -> argparse.ArgumentParser:
    """Add list command subparser to the main parser.

    Args:
        subparsers: Subparsers object from the main argument parser

    Returns:
        The configured list subparser
    """
    list_parser = subparsers.add_parser(
        "list",
        help="List files under directories",
        description=(
            "Print every file under the given directories, using git ls-files "
            "for git working trees and a filesystem walk otherwise"
        ),
    )

    list_parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        default=[Path(".")],
        help="Root directories to list (default: current directory)",
    )

    # Add common arguments
    list_parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    list_parser.add_argument(
        "--config",
        type=Path,
        help="Configuration file path",
    )
    list_parser.add_argument(
        "--null",
        "-0",
        action="store_true",
        help="Separate output paths with NUL instead of newline",
    )
    list_parser.add_argument(
        "--stats",
        action="store_true",
        help="Print a summary table to stderr when done",
    )

    LoadingConfig.add_cli_arguments(list_parser)

    return cast(argparse.ArgumentParser, list_parser)


__all__: list[str] = ["add_list_subparser"]
