"""
Pytest configuration and fixtures for PathHound tests.
"""

import os
import shutil
import sys
import tempfile
from pathlib import Path

import pytest
from loguru import logger


@pytest.fixture
def temp_root():
    """Create a temporary root directory for loading tests."""
    # Resolve so git's reported working-tree root matches exactly
    temp_dir = Path(tempfile.mkdtemp()).resolve()
    root = temp_dir / "root"
    root.mkdir()

    yield root

    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def clean_environment():
    """Clean up PathHound environment variables before and after tests."""
    # Store original values
    original_env = {}
    for key in list(os.environ.keys()):
        if key.startswith("PATHHOUND_"):
            original_env[key] = os.environ[key]
            del os.environ[key]

    yield

    # Restore original values
    for key in list(os.environ.keys()):
        if key.startswith("PATHHOUND_"):
            del os.environ[key]

    for key, value in original_env.items():
        os.environ[key] = value


@pytest.fixture
def reset_logging():
    """Restore the default loguru sink after tests that reconfigure logging."""
    yield
    logger.remove()
    logger.add(sys.stderr)
