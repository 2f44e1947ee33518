"""List command module - prints every file under the requested roots."""

import argparse
import asyncio
import os
import sys
import time
from typing import TextIO

from loguru import logger

from pathhound.core.config.config import Config
from pathhound.services.loading_coordinator import LoadingCoordinator

from ..utils.rich_output import RichOutputFormatter, format_stats
from ..utils.validation import validate_path


def _silence_stdout() -> None:
    """Point stdout at devnull so the closed pipe is not flushed again at exit."""
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())


async def list_command(
    args: argparse.Namespace, config: Config, out: TextIO | None = None
) -> int:
    """Execute the list command.

    Args:
        args: Parsed command-line arguments
        config: Pre-validated configuration instance
        out: Stream receiving the paths (default: stdout)

    Returns:
        Process exit status
    """
    out = out or sys.stdout
    formatter = RichOutputFormatter(verbose=args.verbose)

    invalid = [
        path
        for path in args.paths
        if not validate_path(path, must_exist=True, must_be_dir=True)
    ]
    if invalid:
        for path in invalid:
            formatter.error(f"Invalid root: {path}")
        return 1

    roots = [str(path.resolve()) for path in args.paths]
    separator = "\0" if args.null else "\n"

    formatter.verbose_info(f"Roots: {roots}")
    formatter.verbose_info(f"Config: {config.loading!r}")

    pipe_closed = False

    def _write_batch(batch: list[str]) -> None:
        nonlocal pipe_closed
        if pipe_closed:
            return
        try:
            out.write(separator.join(batch) + separator)
            out.flush()
        except BrokenPipeError:
            # Reader went away (e.g. piped into head); stop loading
            pipe_closed = True
            load_task.cancel()

    coordinator = LoadingCoordinator(config.loading)
    started = time.perf_counter()
    load_task = asyncio.create_task(coordinator.load(roots, on_batch=_write_batch))
    try:
        await load_task
    except asyncio.CancelledError:
        if not pipe_closed:
            raise
        logger.debug("Output closed, stopped loading paths")
        if out is sys.stdout:
            _silence_stdout()
        return 0
    elapsed = time.perf_counter() - started

    stats = coordinator.get_stats()
    logger.info(f"Loaded {format_stats(stats)} in {elapsed:.2f}s")
    if args.stats:
        formatter.stats_table(stats, elapsed)

    return 0
