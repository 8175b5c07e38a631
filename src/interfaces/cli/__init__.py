"""CLI interface module."""

from .uniscout import cli

__all__ = ["cli"]
