"""Core package for PathHound."""
