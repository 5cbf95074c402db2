"""CLI module for formatrouter."""

from formatrouter.cli.main import app, main_cli

__all__ = [
    "app",
    "main_cli",
]
