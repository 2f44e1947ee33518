"""Configuration package for PathHound."""

from .config import Config, get_config, reset_config, set_config
from .loading_config import LoadingConfig

__all__ = ["Config", "LoadingConfig", "get_config", "reset_config", "set_config"]
