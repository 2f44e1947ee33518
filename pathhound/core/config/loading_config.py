"""Path loading configuration for PathHound.

This module provides configuration for path discovery including symlink
handling, git integration, batching and concurrency limits.
"""

import argparse
import os
from typing import Any

from pydantic import BaseModel, Field, field_validator

from pathhound.services.git_enumerator import default_git_binary


def _parse_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


class LoadingConfig(BaseModel):
    """Configuration for path loading behavior.

    Controls how roots are enumerated and how results are streamed.
    """

    # Traversal behavior
    traverse_symlink_directories: bool = Field(
        default=False,
        description="Recurse into directories reached through symbolic links",
    )
    ignore_vcs_ignores: bool = Field(
        default=True,
        description="Honor .gitignore and other git exclude rules on the git fast path",
    )
    use_git: bool = Field(
        default=True,
        description="Enumerate git working trees with git ls-files when possible",
    )
    git_binary: str = Field(
        default_factory=default_git_binary,
        description="Git executable used for the fast path",
    )
    git_root_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for asking git for a working-tree root",
    )

    # Streaming and concurrency
    batch_size: int = Field(
        default=100, ge=1, le=10000, description="Paths per emitted batch"
    )
    max_concurrent: int = Field(
        default=64, ge=1, description="Maximum concurrent filesystem operations"
    )
    queue_size: int = Field(
        default=16, ge=1, description="Batches buffered when streaming results"
    )

    # Ignore patterns
    ignored_names: list[str] = Field(
        default_factory=lambda: [
            ".git",
            ".hg",
            ".svn",
            ".DS_Store",
            "._*",
            "Thumbs.db",
            "desktop.ini",
        ],
        description="Glob patterns for paths to ignore",
    )

    @field_validator("ignored_names")
    def validate_patterns(cls, v: list[str]) -> list[str]:
        """Validate glob patterns."""
        if not isinstance(v, list):
            raise ValueError("Patterns must be a list")

        # Remove duplicates while preserving order
        seen = set()
        unique = []
        for pattern in v:
            if pattern not in seen:
                seen.add(pattern)
                unique.append(pattern)

        return unique

    @classmethod
    def add_cli_arguments(cls, parser: argparse.ArgumentParser) -> None:
        """Add loading-related CLI arguments."""
        parser.add_argument(
            "--follow-symlinks",
            action="store_true",
            help="Recurse into directories reached through symbolic links",
        )

        parser.add_argument(
            "--no-vcs-ignores",
            action="store_true",
            help="Do not apply .gitignore rules when listing git working trees",
        )

        parser.add_argument(
            "--no-git",
            action="store_true",
            help="Always walk the filesystem instead of asking git",
        )

        parser.add_argument(
            "--ignore",
            action="append",
            help=(
                "Glob pattern to ignore, added to the configured patterns "
                "(can be specified multiple times)"
            ),
        )

        parser.add_argument(
            "--batch-size",
            type=int,
            default=None,
            help="Number of paths per emitted batch. Default: 100",
        )

        parser.add_argument(
            "--max-concurrent",
            type=int,
            default=None,
            help="Maximum concurrent filesystem operations. Default: 64",
        )

        parser.add_argument(
            "--git-binary",
            type=str,
            default=None,
            help="Git executable to use for the fast path",
        )

    @classmethod
    def load_from_env(cls) -> dict[str, Any]:
        """Load loading config from environment variables."""
        config: dict[str, Any] = {}

        if follow := os.getenv("PATHHOUND_LOADING__TRAVERSE_SYMLINK_DIRECTORIES"):
            config["traverse_symlink_directories"] = _parse_bool(follow)
        if vcs := os.getenv("PATHHOUND_LOADING__IGNORE_VCS_IGNORES"):
            config["ignore_vcs_ignores"] = _parse_bool(vcs)
        if use_git := os.getenv("PATHHOUND_LOADING__USE_GIT"):
            config["use_git"] = _parse_bool(use_git)
        if git_binary := os.getenv("PATHHOUND_LOADING__GIT_BINARY"):
            config["git_binary"] = git_binary

        # Handle comma-separated ignore patterns
        if ignored := os.getenv("PATHHOUND_LOADING__IGNORED_NAMES"):
            config["ignored_names"] = [p for p in ignored.split(",") if p]

        if timeout := os.getenv("PATHHOUND_LOADING__GIT_ROOT_TIMEOUT_SECONDS"):
            try:
                config["git_root_timeout_seconds"] = float(timeout)
            except ValueError:
                # Ignore invalid env values and keep default
                pass
        for field_name in ("batch_size", "max_concurrent", "queue_size"):
            if raw := os.getenv(f"PATHHOUND_LOADING__{field_name.upper()}"):
                try:
                    config[field_name] = int(raw)
                except ValueError:
                    pass

        return config

    @classmethod
    def extract_cli_overrides(cls, args: Any) -> dict[str, Any]:
        """Extract loading config from CLI arguments."""
        overrides: dict[str, Any] = {}

        if getattr(args, "follow_symlinks", False):
            overrides["traverse_symlink_directories"] = True
        if getattr(args, "no_vcs_ignores", False):
            overrides["ignore_vcs_ignores"] = False
        if getattr(args, "no_git", False):
            overrides["use_git"] = False
        if getattr(args, "git_binary", None):
            overrides["git_binary"] = args.git_binary
        if getattr(args, "batch_size", None) is not None:
            overrides["batch_size"] = args.batch_size
        if getattr(args, "max_concurrent", None) is not None:
            overrides["max_concurrent"] = args.max_concurrent

        return overrides

    def __repr__(self) -> str:
        """String representation of loading configuration."""
        return (
            f"LoadingConfig("
            f"follow_symlinks={self.traverse_symlink_directories}, "
            f"use_git={self.use_git}, "
            f"batch_size={self.batch_size}, "
            f"{len(self.ignored_names)} ignores)"
        )
