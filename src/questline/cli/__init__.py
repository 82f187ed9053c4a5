"""
CLI module for Questline.

Provides the command-line interface using Click.
"""

from questline.cli.main import cli, main

__all__ = ["main", "cli"]
