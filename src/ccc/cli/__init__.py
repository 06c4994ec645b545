"""
CLI layer for ccc.

Provides a Typer application that reads the trait registry: the operation
vocabulary, the registered backends, and which backend implements what.

Entry point::

    ccc --help
"""

from ccc.cli.app import app

__all__ = ["app"]
