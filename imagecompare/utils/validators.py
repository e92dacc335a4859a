"""
Input validation for imagecompare.

Provides validators for directories, files, thresholds, colors and worker
counts used by the CLI and the HTTP API.
"""

from __future__ import annotations

import os
from typing import Any, Iterable


def validate_directory(directory: str) -> tuple[bool, str]:
    """
    Validate that a directory exists and is accessible.

    Args:
        directory: Directory path to validate

    Returns:
        Tuple of (is_valid, error_message)

    Examples:
        >>> validate_directory('/nonexistent/directory')
        (False, 'Directory not found: /nonexistent/directory')
    """
    if not directory:
        return False, "Directory path is required"

    if not os.path.exists(directory):
        return False, f"Directory not found: {directory}"

    if not os.path.isdir(directory):
        return False, f"Path is not a directory: {directory}"

    if not os.access(directory, os.R_OK):
        return False, f"Cannot read directory (permission denied): {directory}"

    return True, ""


def validate_directories(directories: Iterable[str]) -> tuple[bool, str]:
    """Validate a list of directories, stopping at the first invalid one."""
    directories = list(directories or [])
    if not directories:
        return False, "At least one directory is required"
    for directory in directories:
        is_valid, error = validate_directory(directory)
        if not is_valid:
            return False, error
    return True, ""


def validate_file(filepath: str) -> tuple[bool, str]:
    """
    Validate that a file exists and is readable.

    Examples:
        >>> validate_file('/nonexistent/file.png')
        (False, 'File not found: /nonexistent/file.png')
    """
    if not filepath:
        return False, "File path is required"

    if not os.path.exists(filepath):
        return False, f"File not found: {filepath}"

    if not os.path.isfile(filepath):
        return False, f"Path is not a file: {filepath}"

    if not os.access(filepath, os.R_OK):
        return False, f"File is not readable (permission denied): {filepath}"

    return True, ""


def validate_threshold(threshold: Any) -> tuple[bool, str]:
    """
    Validate a similarity threshold percentage.

    Examples:
        >>> validate_threshold(90)
        (True, '')
        >>> validate_threshold(150)
        (False, 'Threshold must be between 0 and 100')
    """
    try:
        threshold = float(threshold)
    except (ValueError, TypeError):
        return False, "Threshold must be a number"
    if not 0 <= threshold <= 100:
        return False, "Threshold must be between 0 and 100"
    return True, ""


def validate_channel_tolerance(value: Any, name: str = "Threshold") -> tuple[bool, str]:
    """
    Validate a per-channel tolerance (0-255).

    Examples:
        >>> validate_channel_tolerance(-1, 'Range')
        (False, 'Range must be between 0 and 255')
    """
    try:
        value = int(value)
    except (ValueError, TypeError):
        return False, f"{name} must be an integer"
    if not 0 <= value <= 255:
        return False, f"{name} must be between 0 and 255"
    return True, ""


def validate_rgb(r: Any, g: Any, b: Any) -> tuple[bool, str]:
    """Validate three color channel values (0-255)."""
    for name, value in (('Red', r), ('Green', g), ('Blue', b)):
        is_valid, error = validate_channel_tolerance(value, name)
        if not is_valid:
            return False, error
    return True, ""


def validate_workers(workers: Any) -> tuple[bool, str]:
    """Validate the number of worker threads (1-32)."""
    try:
        workers = int(workers)
    except (ValueError, TypeError):
        return False, "Workers must be an integer"
    if not 1 <= workers <= 32:
        return False, "Workers must be between 1 and 32"
    return True, ""


__all__ = [
    'validate_directory',
    'validate_directories',
    'validate_file',
    'validate_threshold',
    'validate_channel_tolerance',
    'validate_rgb',
    'validate_workers',
]
