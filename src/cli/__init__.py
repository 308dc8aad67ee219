"""Command-line interface for the slopopedia wiki.

This package provides the `slopopedia` CLI: a Typer application whose
commands create, edit, link, search, diff, export and sync wiki pages,
with Rich terminal output and a YAML configuration file.
"""

from .config import ConfigLoader
from .models import ExitCode, ExportFormat, WikiConfig
from .output import OutputHandler
from .errors import CLIError, ConfigError, ConfigFilesystemError

__all__ = [
    'ConfigLoader',
    'OutputHandler',
    'ExitCode',
    'ExportFormat',
    'WikiConfig',
    'CLIError',
    'ConfigError',
    'ConfigFilesystemError',
]
