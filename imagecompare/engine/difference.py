"""
Pixel difference highlighter for the engine package.

Compares two images pixel by pixel and paints every differing pixel of a
copy of the first image with a highlight color.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Union

from ..config import DEFAULT_HIGHLIGHT_COLOR, DEFAULT_WORKERS
from .dependencies import ImageColor, np
from .errors import PreconditionError
from .pixels import PixelBuffer, load_pixel_buffer

ColorArg = Union[str, tuple, list]


def parse_color(color: ColorArg) -> tuple[int, int, int, int]:
    """
    Normalize a color argument to an (r, g, b, a) tuple.

    Accepts 3- or 4-tuples and any string Pillow's ImageColor understands
    (``"red"``, ``"#ff000080"``, ``"rgb(0, 255, 0)"``).
    """
    if isinstance(color, str):
        try:
            value = ImageColor.getrgb(color)
        except ValueError as e:
            raise PreconditionError(f"Unknown color: {color}") from e
    else:
        value = tuple(int(c) for c in color)

    if len(value) == 3:
        value = value + (255,)
    if len(value) != 4 or not all(0 <= c <= 255 for c in value):
        raise PreconditionError(f"Invalid color: {color}")
    return value


def highlight_diff(
    first: PixelBuffer,
    second: PixelBuffer,
    highlight_color: ColorArg = DEFAULT_HIGHLIGHT_COLOR,
    workers: int = DEFAULT_WORKERS,
) -> PixelBuffer:
    """
    Mark every pixel that differs between two images.

    Both images are cut to the common ``min(width) x min(height)`` area.
    Rows are split into one chunk per worker; each worker writes only its own
    rows of the working copy.

    Args:
        first: Image whose pixels form the output
        second: Image to compare against
        highlight_color: Color for differing pixels
        workers: Number of worker threads

    Returns:
        New PixelBuffer the size of the common area
    """
    if first is None:
        raise PreconditionError("Error image was empty: first")
    if second is None:
        raise PreconditionError("Error image was empty: second")

    width = min(first.width, second.width)
    height = min(first.height, second.height)
    marker = np.array(parse_color(highlight_color), dtype=np.uint8)

    canvas = np.array(first.pixels[:height, :width], copy=True)
    packed_first = first.crop(0, 0, width, height).packed_argb()
    packed_second = second.crop(0, 0, width, height).packed_argb()

    def process_rows(start: int, stop: int) -> None:
        changed = packed_first[start:stop] != packed_second[start:stop]
        canvas[start:stop][changed] = marker

    workers = max(1, min(workers, height))
    step = -(-height // workers)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(process_rows, start, min(start + step, height))
            for start in range(0, height, step)
        ]
        for future in futures:
            future.result()

    return PixelBuffer(canvas)


def highlight_differences(
    path_a: Union[str, Path],
    path_b: Union[str, Path],
    color: ColorArg = DEFAULT_HIGHLIGHT_COLOR,
) -> PixelBuffer:
    """Decode two files and return their highlighted difference image."""
    first = load_pixel_buffer(path_a, role="first")
    second = load_pixel_buffer(path_b, role="second")
    return highlight_diff(first, second, color)


__all__ = ['parse_color', 'highlight_diff', 'highlight_differences']
