"""Version information for PathHound."""

__version__ = "0.1.0"
