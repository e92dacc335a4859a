"""
File discovery module for the engine package.

Provides functionality to find and enumerate image files in one or more
directories, filtered by extension, with optional recursive scanning.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Union

from ..config import IMAGE_EXTENSIONS
from .dependencies import HAS_HEIF_SUPPORT

PathArg = Union[str, Path]


def normalize_extensions(extensions: Optional[Iterable[str]]) -> set[str]:
    """
    Normalize an extension list to lowercase ``.ext`` form.

    Accepts ``"png"``, ``".PNG"`` and ``"*.png"`` alike. ``None`` or an empty
    list selects the default IMAGE_EXTENSIONS.

    Examples:
        >>> sorted(normalize_extensions(['PNG', '*.jpg']))
        ['.jpg', '.png']
    """
    if not extensions:
        result = set(IMAGE_EXTENSIONS)
    else:
        result = set()
        for ext in extensions:
            ext = ext.strip().lower().lstrip('*')
            if not ext:
                continue
            if not ext.startswith('.'):
                ext = '.' + ext
            result.add(ext)

    if not HAS_HEIF_SUPPORT:
        result -= {'.heic', '.heif'}
    return result


def find_image_files(
    roots: Union[PathArg, Iterable[PathArg]],
    recursive: bool = True,
    extensions: Optional[Iterable[str]] = None,
) -> list[str]:
    """
    Find all image files in the given directories.

    Args:
        roots: A directory path, or a list of directory paths
        recursive: If True, search subdirectories recursively
        extensions: Extensions to include (default: IMAGE_EXTENSIONS)

    Returns:
        List of absolute file paths as strings, sorted per directory

    Notes:
        - Directories that do not exist are skipped
        - Handles symlinks by resolving to canonical paths
        - Deduplicates files that may be encountered via multiple paths
    """
    if isinstance(roots, (str, Path)):
        roots = [roots]

    wanted = normalize_extensions(extensions)

    images = []
    seen = set()  # Track resolved paths to avoid duplicates

    for root_path in roots:
        root = Path(root_path)
        if not root.is_dir():
            continue

        # Choose iterator based on recursive flag
        iterator = root.rglob('*') if recursive else root.glob('*')

        for filepath in sorted(iterator):
            if filepath.is_file() and filepath.suffix.lower() in wanted:
                # Resolve to absolute path and deduplicate
                resolved = str(filepath.resolve())
                if resolved not in seen:
                    seen.add(resolved)
                    images.append(resolved)

    return images


__all__ = ['normalize_extensions', 'find_image_files']
