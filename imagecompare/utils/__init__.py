"""
Utilities package for imagecompare.

Provides:
- validators: Input validation for the CLI and the HTTP API
- exporters: Export grouping results to files
"""

from __future__ import annotations

from . import validators
from . import exporters

from .validators import (
    validate_directory,
    validate_directories,
    validate_file,
    validate_threshold,
    validate_channel_tolerance,
    validate_rgb,
    validate_workers,
)
from .exporters import export_groups, EXPORT_FORMATS

__all__ = [
    # Submodules
    'validators',
    'exporters',
    # Validators
    'validate_directory',
    'validate_directories',
    'validate_file',
    'validate_threshold',
    'validate_channel_tolerance',
    'validate_rgb',
    'validate_workers',
    # Exporters
    'export_groups',
    'EXPORT_FORMATS',
]
