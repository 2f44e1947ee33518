"""Command line interface for PathHound."""
