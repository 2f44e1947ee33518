"""Utility helpers for PathHound."""
