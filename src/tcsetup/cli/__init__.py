"""
CLI module for tcsetup.

Provides the command-line interface using Click.
"""

from tcsetup.cli.main import cli, main

__all__ = ["main", "cli"]
