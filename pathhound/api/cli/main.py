"""CLI entry point for PathHound."""

import argparse
import asyncio
import sys

from loguru import logger
from pydantic import ValidationError

from pathhound.core.config.config import Config


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI.

    Args:
        verbose: Whether to enable verbose logging
    """
    logger.remove()

    if verbose:
        logger.add(
            sys.stderr,
            level="DEBUG",
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
                "<level>{message}</level>"
            ),
        )
    else:
        logger.add(
            sys.stderr,
            level="INFO",
            format=(
                "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
                "<level>{message}</level>"
            ),
        )


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the complete argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    from .parsers import create_main_parser, setup_subparsers
    from .parsers.list_parser import add_list_subparser

    parser = create_main_parser()
    subparsers = setup_subparsers(parser)

    add_list_subparser(subparsers)

    return parser


async def async_main(argv: list[str] | None = None) -> int:
    """Async main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(getattr(args, "verbose", False))

    try:
        config = Config.from_cli_args(args)
    except (ValueError, ValidationError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    if args.command == "list":
        from .commands.list_paths import list_command

        return await list_command(args, config)

    logger.error(f"Unknown command: {args.command}")
    return 1


def main() -> None:
    """Main entry point for the CLI."""
    try:
        sys.exit(asyncio.run(async_main()))
    except KeyboardInterrupt:
        sys.exit(130)
    except BrokenPipeError:
        # Output consumer went away (e.g. piped into head)
        sys.exit(0)


if __name__ == "__main__":
    main()
