"""
CLI module for sciter-typings.
"""

from sciter_typings.cli.main import app


def cli():
    """Entry point for the CLI."""
    app()


__all__ = ["app", "cli"]
