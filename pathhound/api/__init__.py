"""API layer for PathHound."""
