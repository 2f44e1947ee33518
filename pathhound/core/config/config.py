"""Centralized configuration management for PathHound.

This module provides a unified configuration system with clear precedence:
1. CLI arguments (highest priority)
2. Environment variables
3. Config file (via --config path)
4. Default values (lowest priority)
"""

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .loading_config import LoadingConfig


class Config(BaseModel):
    """Centralized configuration for PathHound."""

    model_config = ConfigDict(validate_assignment=True)

    loading: LoadingConfig = Field(default_factory=LoadingConfig)
    debug: bool = Field(default=False)

    def __init__(
        self,
        config_file: Optional[Path] = None,
        overrides: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ):
        """Initialize configuration with hierarchical loading.

        Args:
            config_file: Optional path to configuration file (from --config)
            overrides: Optional dictionary of CLI overrides
            **kwargs: Additional keyword arguments
        """
        config_data: Dict[str, Any] = {}

        env_vars = self._load_env_vars()

        # 1. Load config file if provided (from --config)
        if config_file is not None:
            if not config_file.exists():
                raise ValueError(f"Config file not found: {config_file}")
            try:
                with open(config_file) as f:
                    file_config = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(
                    f"Invalid JSON in config file {config_file}: {e}. "
                    "Please check the file format and try again."
                )
            self._deep_merge(config_data, file_config)

        # 2. Environment variables take precedence over the file
        self._deep_merge(config_data, copy.deepcopy(env_vars))

        # 3. Apply CLI overrides
        if overrides:
            self._deep_merge(config_data, overrides)

        # 4. Merge with any additional kwargs
        if kwargs:
            self._deep_merge(config_data, kwargs)

        super().__init__(**config_data)

    @staticmethod
    def _load_env_vars() -> Dict[str, Any]:
        """Load configuration from environment variables.

        Uses PATHHOUND_ prefix with __ delimiter for nested values.
        """
        config: Dict[str, Any] = {}

        if debug := os.getenv("PATHHOUND_DEBUG"):
            config["debug"] = debug.lower() in ("true", "1", "yes")

        loading_config = LoadingConfig.load_from_env()
        if loading_config:
            config["loading"] = loading_config

        return config

    @classmethod
    def _deep_merge(cls, base: Dict[str, Any], update: Dict[str, Any]) -> None:
        """Deep merge update dictionary into base dictionary."""
        for key, value in update.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                cls._deep_merge(base[key], value)
            else:
                base[key] = value

    @classmethod
    def from_cli_args(cls, args: Any) -> "Config":
        """Create configuration from CLI arguments.

        Args:
            args: Parsed command line arguments

        Returns:
            Configured Config instance
        """
        overrides: Dict[str, Any] = {}

        loading_overrides = LoadingConfig.extract_cli_overrides(args)
        if loading_overrides:
            overrides["loading"] = loading_overrides

        if getattr(args, "debug", False):
            overrides["debug"] = True
        elif getattr(args, "verbose", False):
            overrides["debug"] = True

        config = cls(config_file=getattr(args, "config", None), overrides=overrides)

        # --ignore extends the patterns from defaults, file and environment
        if extra_ignores := getattr(args, "ignore", None):
            loading = config.loading.model_dump()
            loading["ignored_names"] = [*loading["ignored_names"], *extra_ignores]
            config.loading = LoadingConfig(**loading)

        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {
            "loading": self.loading.model_dump(),
            "debug": self.debug,
        }


# Global configuration instance
_global_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = Config()
    return _global_config


def set_config(config: Config) -> None:
    """Set the global configuration instance."""
    global _global_config
    _global_config = config


def reset_config() -> None:
    """Reset the global configuration instance."""
    global _global_config
    _global_config = None
