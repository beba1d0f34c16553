"""
CLI commands for amnotifier.
"""

from amnotifier.cli.main import main, preview_command, send_command, validate_command

__all__ = [
    "main",
    "preview_command",
    "send_command",
    "validate_command",
]
