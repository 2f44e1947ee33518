"""Argument validation helpers for PathHound CLI commands."""

from pathlib import Path

from loguru import logger


def validate_path(path: Path, must_exist: bool = True, must_be_dir: bool = False) -> bool:
    """Validate a path argument.

    Args:
        path: Path to validate
        must_exist: Whether the path must exist
        must_be_dir: Whether the path must be a directory

    Returns:
        True if valid, False otherwise
    """
    if must_exist and not path.exists():
        logger.error(f"Path does not exist: {path}")
        return False

    if must_be_dir and path.exists() and not path.is_dir():
        logger.error(f"Path is not a directory: {path}")
        return False

    return True
