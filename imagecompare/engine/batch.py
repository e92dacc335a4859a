"""
Batch processing module for the engine package.

Decodes and fingerprints many files in parallel with skip-and-continue
error handling, then runs the grouping engines and translates fingerprint
ids back to paths.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Iterable, Optional

from ..config import GRID_SIZE, DEFAULT_WORKERS, DEFAULT_SIMILARITY_THRESHOLD
from ..models import Fingerprint
from .dependencies import HAS_TQDM, _tqdm_class
from .errors import DecodeError, InputMissingError
from .file_discovery import find_image_files
from .fingerprint import generate_fingerprint
from .grouping import GroupingContext, group_duplicates, group_similar
from .pixels import load_pixel_buffer

_logger = logging.getLogger(__name__)


def fingerprint_file(filepath: str, id: int, grid_size: int = GRID_SIZE) -> Fingerprint:
    """Decode one file and build its fingerprint."""
    return generate_fingerprint(load_pixel_buffer(filepath), id, grid_size=grid_size)


def fingerprint_files(
    filepaths: list[str],
    max_workers: int = DEFAULT_WORKERS,
    grid_size: int = GRID_SIZE,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    show_progress: bool = False,
) -> tuple[list[Fingerprint], GroupingContext]:
    """
    Fingerprint multiple files in parallel.

    Files that are missing or cannot be decoded are skipped and logged; the
    rest of the batch continues. Fingerprint ids are indices into
    ``filepaths`` and the returned list is ordered by id.

    Args:
        filepaths: List of image paths to fingerprint
        max_workers: Number of parallel workers
        grid_size: Side length N of the fingerprint grid
        progress_callback: Optional callback(current, total) for progress updates
        show_progress: Whether to show tqdm progress bar

    Returns:
        Tuple of (fingerprints, GroupingContext mapping ids to paths)
    """
    context = GroupingContext.from_paths(filepaths)
    if not filepaths:
        return [], context

    results: list[Fingerprint] = []
    skipped = 0

    pbar: Optional[Any] = None
    if HAS_TQDM and show_progress and _tqdm_class is not None:
        pbar = _tqdm_class(
            total=len(filepaths),
            desc="Fingerprinting images",
            unit="img",
            ncols=80,
        )

    # Batch progress callbacks to reduce overhead (every 1000 files or 1 second)
    last_callback_time = time.time()
    callback_batch_size = 1000
    callback_interval = 1.0  # seconds

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        futures = {
            executor.submit(fingerprint_file, path, index, grid_size): path
            for index, path in enumerate(filepaths)
        }

        for i, future in enumerate(as_completed(futures)):
            filepath = futures[future]
            try:
                results.append(future.result())
            except InputMissingError:
                _logger.debug(f"Skipping missing file: {filepath}")
                skipped += 1
            except DecodeError as e:
                _logger.debug(f"Skipping undecodable file: {e}")
                skipped += 1

            if pbar is not None:
                pbar.update(1)

            if progress_callback:
                current_time = time.time()
                should_callback = (
                    (i + 1) % callback_batch_size == 0 or
                    current_time - last_callback_time >= callback_interval or
                    i == len(filepaths) - 1  # Always callback on last item
                )
                if should_callback:
                    progress_callback(i + 1, len(filepaths))
                    last_callback_time = current_time

    if pbar is not None:
        pbar.close()

    if skipped:
        _logger.warning(f"Could not fingerprint {skipped:,} of {len(filepaths):,} files")

    results.sort(key=lambda fp: fp.id)
    return results, context


def _collect_fingerprints(
    paths: Any,
    recurse_subfolders: bool,
    extensions: Optional[Iterable[str]],
    max_workers: int,
    show_progress: bool,
) -> Optional[tuple[list[Fingerprint], GroupingContext]]:
    image_paths = find_image_files(paths, recursive=recurse_subfolders, extensions=extensions)
    _logger.info(f"Found {len(image_paths):,} image files")
    if not image_paths:
        return None

    fingerprints, context = fingerprint_files(
        image_paths,
        max_workers=max_workers,
        show_progress=show_progress,
    )
    if not fingerprints:
        return None
    return fingerprints, context


def find_duplicate_groups(
    paths: Any,
    recurse_subfolders: bool = True,
    extensions: Optional[Iterable[str]] = None,
    max_workers: int = DEFAULT_WORKERS,
    show_progress: bool = False,
) -> Optional[list[list[str]]]:
    """
    Find all duplicate images in one or more folders.

    Args:
        paths: Folder path or list of folder paths
        recurse_subfolders: Whether to look in subfolders too
        extensions: Extensions to include (default: IMAGE_EXTENSIONS)
        max_workers: Number of parallel fingerprinting workers
        show_progress: Whether to show tqdm progress bars

    Returns:
        One list of paths per group of duplicates, or None when no image
        could be fingerprinted
    """
    collected = _collect_fingerprints(paths, recurse_subfolders, extensions, max_workers, show_progress)
    if collected is None:
        return None
    fingerprints, context = collected

    groups = context.translate(group_duplicates(fingerprints))
    _logger.info(f"Found {len(groups):,} duplicate groups")
    return groups


def find_similar_groups(
    paths: Any,
    recurse_subfolders: bool = True,
    extensions: Optional[Iterable[str]] = None,
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    max_workers: int = DEFAULT_WORKERS,
    show_progress: bool = False,
    cancel: Optional[threading.Event] = None,
) -> Optional[list[list[str]]]:
    """
    Find all groups of similar images in one or more folders.

    Args:
        paths: Folder path or list of folder paths
        recurse_subfolders: Whether to look in subfolders too
        extensions: Extensions to include (default: IMAGE_EXTENSIONS)
        threshold: Minimum similarity percentage (0-100)
        max_workers: Number of parallel workers
        show_progress: Whether to show tqdm progress bars
        cancel: Optional event that stops the similarity scan

    Returns:
        One list of paths per similarity group, or None when nothing was
        found
    """
    collected = _collect_fingerprints(paths, recurse_subfolders, extensions, max_workers, show_progress)
    if collected is None:
        return None
    fingerprints, context = collected

    id_groups = group_similar(fingerprints, threshold, workers=max_workers, cancel=cancel)
    if not id_groups:
        return None

    groups = context.translate(id_groups)
    _logger.info(f"Found {len(groups):,} similarity groups (threshold={threshold})")
    return groups


__all__ = [
    'fingerprint_file',
    'fingerprint_files',
    'find_duplicate_groups',
    'find_similar_groups',
]
