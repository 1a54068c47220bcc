"""Command line interface for govindex."""

from .main import cli, main

__all__ = ["cli", "main"]
