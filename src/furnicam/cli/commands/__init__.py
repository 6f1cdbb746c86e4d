"""CLI command implementations for the furnicam application.

This package contains subcommands for the furnicam CLI:
- validate: Validate a project file
"""

from furnicam.cli.commands.validate import validate_command

__all__ = ["validate_command"]
