"""
Fingerprint module for the engine package.

Turns a pixel buffer into a Fingerprint (average color + grayscale grid)
and provides the interval-equality predicates used by every duplicate and
similarity check.
"""

from __future__ import annotations

from ..config import GRID_SIZE, COLOR_THRESHOLD
from ..models import Fingerprint
from .dependencies import np
from .errors import PreconditionError
from .pixels import PixelBuffer


def interval_equal(a: int, b: int, threshold: int) -> bool:
    """Return True when ``|a - b| <= threshold``."""
    return abs(a - b) <= threshold


def generate_fingerprint(buffer: PixelBuffer, id: int, grid_size: int = GRID_SIZE) -> Fingerprint:
    """
    Build the fingerprint of an image.

    The buffer is scaled to ``grid_size`` x ``grid_size``; the average color
    is taken over the scaled color cells, and every cell is then reduced to
    its luminance to form the hash.

    Args:
        buffer: Decoded image
        id: Identifier used to translate the fingerprint back to its source
        grid_size: Side length N of the downsampled grid

    Returns:
        Fingerprint for the image

    Raises:
        PreconditionError: If the buffer is missing or grid_size < 1
    """
    if buffer is None:
        raise PreconditionError("Error image was empty: buffer")
    if grid_size < 1:
        raise PreconditionError(f"Grid size must be positive, got {grid_size}")

    scaled = buffer.scale(grid_size, grid_size)
    cells = grid_size * grid_size

    totals = scaled.pixels[:, :, :3].reshape(cells, 3).sum(axis=0, dtype=np.int64)
    r, g, b = (int(total) // cells for total in totals)

    gray = scaled.grayscale()

    return Fingerprint(
        id=id,
        r=r,
        g=g,
        b=b,
        hash=gray.tobytes(),
        grid_size=grid_size,
    )


def check_same_grid(a: Fingerprint, b: Fingerprint) -> None:
    """Raise PreconditionError if two fingerprints were built with different N."""
    if a.grid_size != b.grid_size:
        raise PreconditionError(
            f"Cannot compare fingerprints of grid size {a.grid_size} and {b.grid_size}"
        )


def is_color_equivalent(a: Fingerprint, b: Fingerprint, threshold: int = COLOR_THRESHOLD) -> bool:
    """True when each of R, G and B averages is within ``threshold``."""
    return (
        interval_equal(a.r, b.r, threshold)
        and interval_equal(a.g, b.g, threshold)
        and interval_equal(a.b, b.b, threshold)
    )


def is_duplicate(a: Fingerprint, b: Fingerprint) -> bool:
    """
    Exact-duplicate predicate.

    Every grid cell must be byte-identical and the average colors must be
    within ``COLOR_THRESHOLD`` on each channel.
    """
    check_same_grid(a, b)
    if a.hash != b.hash:
        return False
    return is_color_equivalent(a, b)


__all__ = [
    'interval_equal',
    'generate_fingerprint',
    'check_same_grid',
    'is_color_equivalent',
    'is_duplicate',
]
