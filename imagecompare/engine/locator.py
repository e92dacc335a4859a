"""
Sub-image locator for the engine package.

Checks whether a small image is contained, pixel for pixel, in a bigger
one (a cut-out) and reports where it starts.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional, Union

from ..models import SubImageMatch
from .dependencies import np
from .errors import OperationCancelled, PreconditionError
from .pixels import PixelBuffer, load_pixel_buffer

_logger = logging.getLogger(__name__)


def _matches(window: np.ndarray, expected: np.ndarray, threshold: int) -> bool:
    if threshold == 0:
        return bool(np.array_equal(window, expected))
    return bool(np.all(np.abs(window - expected) <= threshold))


def _check_edges(
    big: np.ndarray,
    small: np.ndarray,
    row: int,
    col: int,
    threshold: int,
) -> bool:
    """Compare the four border lines of the window at (row, col)."""
    small_height, small_width = small.shape[:2]
    bottom = row + small_height - 1
    right = col + small_width - 1

    # top edge
    if not _matches(big[row, col:col + small_width], small[0], threshold):
        return False
    # bottom edge of the window at this position
    if not _matches(big[bottom, col:col + small_width], small[small_height - 1], threshold):
        return False
    # left edge
    if not _matches(big[row:row + small_height, col], small[:, 0], threshold):
        return False
    # right edge
    return _matches(big[row:row + small_height, right], small[:, small_width - 1], threshold)


def _check_full(
    big: np.ndarray,
    small: np.ndarray,
    row: int,
    col: int,
    threshold: int,
) -> bool:
    small_height, small_width = small.shape[:2]
    window = big[row:row + small_height, col:col + small_width]
    return _matches(window, small, threshold)


def find_sub_image(
    big: PixelBuffer,
    small: PixelBuffer,
    threshold: int = 0,
    cancel: Optional[threading.Event] = None,
) -> SubImageMatch:
    """
    Find the first position where ``small`` appears inside ``big``.

    Candidate top-left offsets are visited row by row, left to right. At each
    offset only the window's border lines are compared first; the whole
    window is compared only when all four borders match.

    Args:
        big: Image to search in
        small: Image to search for
        threshold: Allowed difference per color channel (0 = exact)
        cancel: Optional event checked once per candidate row

    Returns:
        SubImageMatch with the (x, y) offset, or ``found=False``

    Raises:
        PreconditionError: If either image is missing or threshold is negative
        OperationCancelled: If ``cancel`` was set during the scan
    """
    if big is None:
        raise PreconditionError("Error image was empty: big")
    if small is None:
        raise PreconditionError("Error image was empty: small")
    if threshold < 0:
        raise PreconditionError(f"Threshold must not be negative, got {threshold}")

    if small.height > big.height or small.width > big.width:
        return SubImageMatch.not_found()

    big_rgb = big.rgb()
    small_rgb = small.rgb()

    for i in range(big.height - small.height + 1):
        if cancel is not None and cancel.is_set():
            raise OperationCancelled("Sub-image search cancelled")
        for j in range(big.width - small.width + 1):
            if _check_edges(big_rgb, small_rgb, i, j, threshold) and \
                    _check_full(big_rgb, small_rgb, i, j, threshold):
                _logger.debug(f"Sub-image found at x={j}, y={i}")
                return SubImageMatch(found=True, offset=(j, i))

    return SubImageMatch.not_found()


def find_sub_image_in_files(
    big_path: Union[str, Path],
    small_path: Union[str, Path],
    threshold: int = 0,
) -> SubImageMatch:
    """
    Decode both files, then delegate to ``find_sub_image``.

    Raises:
        InputMissingError: If either file does not exist
        DecodeError: If either file cannot be decoded
    """
    big = load_pixel_buffer(big_path, role="big")
    small = load_pixel_buffer(small_path, role="small")
    return find_sub_image(big, small, threshold=threshold)


__all__ = ['find_sub_image', 'find_sub_image_in_files']
