"""
Image analysis module for the engine package.

Provides single-image details, pairwise comparison with descriptors,
similarity of a batch against a reference image, color histograms and
the color-range folder search.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Optional, Union

from ..config import GRID_SIZE
from ..models import CompareResult, Fingerprint, ImageDetails
from .dependencies import np
from .errors import DecodeError, InputMissingError, PreconditionError
from .file_discovery import find_image_files
from .fingerprint import generate_fingerprint, interval_equal
from .pixels import PixelBuffer, load_pixel_buffer
from .similarity import score_similarity

_logger = logging.getLogger(__name__)


def details_from_buffer(
    buffer: PixelBuffer,
    path: str = "",
    file_size: int = 0,
    fingerprint: Optional[Fingerprint] = None,
) -> ImageDetails:
    """Build ImageDetails (dimensions + average color) for a decoded image."""
    fp = fingerprint or generate_fingerprint(buffer, 0, grid_size=GRID_SIZE)
    return ImageDetails(
        path=path,
        width=buffer.width,
        height=buffer.height,
        file_size=file_size,
        r=fp.r,
        g=fp.g,
        b=fp.b,
    )


def get_image_details(image_path: Union[str, Path]) -> Optional[ImageDetails]:
    """
    Analyze an image file and extract its details.

    Returns:
        ImageDetails, or None when the file does not exist

    Raises:
        DecodeError: The file exists but cannot be decoded
    """
    image_path = str(image_path)
    if not os.path.isfile(image_path):
        return None
    buffer = load_pixel_buffer(image_path)
    return details_from_buffer(buffer, path=image_path, file_size=os.path.getsize(image_path))


def compare_buffers(first: PixelBuffer, second: PixelBuffer) -> CompareResult:
    """Compare two decoded images; descriptors list dimensions only."""
    if first is None:
        raise PreconditionError("Error image was empty: first")
    if second is None:
        raise PreconditionError("Error image was empty: second")

    one = generate_fingerprint(first, 0)
    two = generate_fingerprint(second, 1)
    return CompareResult(
        similarity=score_similarity(one, two),
        descriptor_a=details_from_buffer(first, fingerprint=one).describe_simple(),
        descriptor_b=details_from_buffer(second, fingerprint=two).describe_simple(),
    )


def compare_images(path_a: Union[str, Path], path_b: Union[str, Path]) -> CompareResult:
    """
    Compare two image files.

    Both files are mandatory: a missing or undecodable file raises an
    error naming which of the two inputs failed.

    Raises:
        InputMissingError: If either file does not exist
        DecodeError: If either file cannot be decoded
    """
    path_a, path_b = str(path_a), str(path_b)
    first = load_pixel_buffer(path_a, role="first")
    second = load_pixel_buffer(path_b, role="second")

    one = generate_fingerprint(first, 0)
    two = generate_fingerprint(second, 1)
    details_a = details_from_buffer(first, path=path_a, file_size=os.path.getsize(path_a), fingerprint=one)
    details_b = details_from_buffer(second, path=path_b, file_size=os.path.getsize(path_b), fingerprint=two)

    return CompareResult(
        similarity=score_similarity(one, two),
        descriptor_a=details_a.describe(),
        descriptor_b=details_b.describe(),
    )


def get_similarity(image_paths: list[str]) -> Optional[list[float]]:
    """
    Similarity of every image to the first one.

    Returns:
        List with 100.0 for the reference followed by one score per other
        path, or None when fewer than two paths are given or any file was
        skipped
    """
    if not image_paths or len(image_paths) < 2:
        return None

    try:
        reference = generate_fingerprint(load_pixel_buffer(image_paths[0]), 0)
    except (InputMissingError, DecodeError) as e:
        _logger.debug(f"Reference image unavailable: {e}")
        return None

    scores = [100.0]
    for index, path in enumerate(image_paths[1:], start=1):
        try:
            other = generate_fingerprint(load_pixel_buffer(path), index)
        except (InputMissingError, DecodeError) as e:
            _logger.debug(f"Skipping {path}: {e}")
            return None
        scores.append(score_similarity(reference, other))

    return scores


def get_image_details_batch(image_paths: list[str]) -> Optional[list[ImageDetails]]:
    """
    Details for every path, with similarity relative to the first image.

    Each file is decoded and fingerprinted once; the fingerprint feeds both
    the average color and the similarity score.

    Returns:
        List of ImageDetails in input order, or None if any file was skipped
    """
    if not image_paths:
        return None

    details = []
    reference = None
    for index, path in enumerate(image_paths):
        path = str(path)
        try:
            buffer = load_pixel_buffer(path)
        except (InputMissingError, DecodeError) as e:
            _logger.debug(f"Skipping {path}: {e}")
            return None

        fp = generate_fingerprint(buffer, index, grid_size=GRID_SIZE)
        info = details_from_buffer(buffer, path=path, file_size=os.path.getsize(path), fingerprint=fp)
        if reference is None:
            reference = fp
        else:
            info.similarity = score_similarity(reference, fp)
        details.append(info)

    return details


def get_colors(buffer: PixelBuffer) -> dict[tuple[int, int, int, int], int]:
    """Count how many pixels use each distinct RGBA color."""
    if buffer is None:
        raise PreconditionError("Error image was empty: image")
    flat = buffer.pixels.reshape(-1, 4)
    colors, counts = np.unique(flat, axis=0, return_counts=True)
    return {
        tuple(int(c) for c in color): int(count)
        for color, count in zip(colors, counts)
    }


def get_image_colors(image_path: Union[str, Path]) -> dict[tuple[int, int, int, int], int]:
    """
    Decode an image file and count its distinct RGBA colors.

    Raises:
        InputMissingError: The file does not exist
        DecodeError: The file cannot be decoded
    """
    return get_colors(load_pixel_buffer(image_path, role="image"))


def find_images_in_color_range(
    r: int,
    g: int,
    b: int,
    color_range: int,
    folder: Union[str, Path, Iterable],
    recurse_subfolders: bool = True,
    extensions: Optional[Iterable[str]] = None,
) -> Optional[list[str]]:
    """
    Find images whose average color lies within ``color_range`` of (r, g, b).

    Args:
        r, g, b: Target color
        color_range: Allowed difference per channel
        folder: Folder path or list of folder paths
        recurse_subfolders: Whether to look in subfolders too
        extensions: Extensions to include (default: IMAGE_EXTENSIONS)

    Returns:
        Matching paths in scan order, or None when no image could be read
    """
    image_paths = find_image_files(folder, recursive=recurse_subfolders, extensions=extensions)
    if not image_paths:
        return None

    matches = []
    analyzed = 0
    for index, path in enumerate(image_paths):
        try:
            fp = generate_fingerprint(load_pixel_buffer(path), index)
        except (InputMissingError, DecodeError) as e:
            _logger.debug(f"Skipping {path}: {e}")
            continue
        analyzed += 1
        if interval_equal(fp.r, r, color_range) and \
                interval_equal(fp.g, g, color_range) and \
                interval_equal(fp.b, b, color_range):
            matches.append(path)

    if not analyzed:
        return None
    return matches


__all__ = [
    'details_from_buffer',
    'get_image_details',
    'compare_buffers',
    'compare_images',
    'get_similarity',
    'get_image_details_batch',
    'get_colors',
    'get_image_colors',
    'find_images_in_color_range',
]
