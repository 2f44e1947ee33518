"""Ignore pattern matching for path loading.

# FILE_CONTEXT: Compiles user-supplied glob patterns and evaluates them against
#   root-relative paths during the manual walk
# ROLE: Shared, read-only matcher objects handed to every concurrent root task
# RATIONALE: The raw pattern string is kept next to the compiled regex because
#   the git fast path forwards patterns verbatim as --exclude arguments
"""

import os
import re
from dataclasses import dataclass
from fnmatch import translate
from typing import Iterable, Pattern

from loguru import logger

# Longer patterns are rejected outright
MAX_PATTERN_LENGTH = 64 * 1024


def compile_pattern(pattern: str, cache: dict[str, Pattern[str]]) -> Pattern[str]:
    """Compile fnmatch pattern to regex with caching.

    Args:
        pattern: fnmatch-style pattern (e.g., "*.log", "**/build/**")
        cache: Dictionary to cache compiled patterns

    Returns:
        Compiled regex pattern

    Raises:
        re.error: If the translated pattern is not a valid regular expression
    """
    if pattern not in cache:
        cache[pattern] = re.compile(translate(pattern))
    return cache[pattern]


@dataclass(frozen=True)
class IgnorePattern:
    """A compiled ignore glob plus the raw string it was built from."""

    pattern: str
    regex: Pattern[str]
    # Variant without a leading "**/" so the pattern also matches at depth 0
    simple_regex: Pattern[str] | None = None
    # Directory name for "**/name/**" patterns, matched against path parts
    directory_name: str | None = None

    def matches(self, rel_path: str, name: str) -> bool:
        """Check a root-relative POSIX path and its base name against the pattern."""
        if self.directory_name is not None:
            return self.directory_name in rel_path.split("/")
        if self.regex.match(rel_path) or self.regex.match(name):
            return True
        if self.simple_regex is not None:
            return bool(
                self.simple_regex.match(rel_path) or self.simple_regex.match(name)
            )
        return False


def build_ignore_pattern(
    pattern: str, cache: dict[str, Pattern[str]] | None = None
) -> IgnorePattern:
    """Compile a single raw pattern into an IgnorePattern.

    Raises:
        ValueError: If the pattern exceeds MAX_PATTERN_LENGTH
        re.error: If the pattern cannot be compiled
    """
    if len(pattern) > MAX_PATTERN_LENGTH:
        raise ValueError(f"pattern is too long ({len(pattern)} characters)")
    if cache is None:
        cache = {}

    if pattern.startswith("**/") and pattern.endswith("/**") and len(pattern) > 6:
        # Pattern like **/node_modules/** - match directory name anywhere in path
        target_dir = pattern[3:-3]
        if "/" not in target_dir and not any(c in target_dir for c in "*?["):
            return IgnorePattern(
                pattern=pattern,
                regex=compile_pattern(pattern, cache),
                directory_name=target_dir,
            )

    regex = compile_pattern(pattern, cache)
    simple_regex = None
    if pattern.startswith("**/"):
        simple_regex = compile_pattern(pattern[3:], cache)
    return IgnorePattern(pattern=pattern, regex=regex, simple_regex=simple_regex)


def compile_ignore_patterns(patterns: Iterable[str]) -> list[IgnorePattern]:
    """Compile raw ignore strings, dropping empty and malformed ones.

    A malformed pattern is logged as a warning and skipped so that one bad
    entry never aborts the whole load.
    """
    cache: dict[str, Pattern[str]] = {}
    compiled: list[IgnorePattern] = []
    for pattern in patterns:
        if not pattern:
            continue
        try:
            compiled.append(build_ignore_pattern(pattern, cache))
        except (re.error, ValueError) as e:
            logger.warning(f"Error parsing ignore pattern ({pattern}): {e}")
    return compiled


def relative_posix_path(path: str, root: str) -> str:
    """Return path relative to root using forward slashes."""
    prefix = root.rstrip(os.sep) + os.sep
    if path.startswith(prefix):
        rel_path = path[len(prefix) :]
    else:
        try:
            rel_path = os.path.relpath(path, root)
        except ValueError:
            # Different drive on Windows, use as-is
            rel_path = path
    if os.sep != "/":
        rel_path = rel_path.replace(os.sep, "/")
    return rel_path


def is_ignored(path: str, root: str, patterns: list[IgnorePattern]) -> bool:
    """Check whether a path matches any ignore pattern relative to root.

    Args:
        path: Absolute path to check
        root: Root directory the walk started from
        patterns: Compiled ignore patterns

    Returns:
        True if the path should be excluded, False otherwise
    """
    if not patterns:
        return False

    rel_path = relative_posix_path(path, root)
    name = rel_path.rsplit("/", 1)[-1]
    for ignore_pattern in patterns:
        if ignore_pattern.matches(rel_path, name):
            return True
    return False
