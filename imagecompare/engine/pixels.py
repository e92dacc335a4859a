"""
Pixel buffer module for the engine package.

Provides an immutable RGBA pixel buffer backed by numpy, the handful of
geometric operations the comparison algorithms need, and the decoding
entry point that turns an image file into a buffer.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

from .dependencies import Image, np, _logger
from .errors import DecodeError, InputMissingError, PreconditionError

Color = Union[tuple, list]


class PixelBuffer:
    """
    Read-only RGBA pixel grid.

    Pixels are stored as a ``uint8`` array of shape ``(height, width, 4)``.
    The array is copied on construction and marked read-only, so a buffer can
    be handed to worker threads without further care.
    """

    __slots__ = ('_pixels',)

    def __init__(self, pixels: np.ndarray):
        arr = np.array(pixels, dtype=np.uint8, copy=True)
        if arr.ndim != 3 or arr.shape[2] != 4:
            raise PreconditionError(f"Expected an (height, width, 4) RGBA array, got shape {arr.shape}")
        if arr.shape[0] == 0 or arr.shape[1] == 0:
            raise PreconditionError("Error image was empty")
        arr.flags.writeable = False
        self._pixels = arr

    @classmethod
    def from_image(cls, img: Image.Image) -> 'PixelBuffer':
        """Create a buffer from a decoded Pillow image (any mode)."""
        if img.mode != 'RGBA':
            img = img.convert('RGBA')
        return cls(np.asarray(img))

    @classmethod
    def solid(cls, width: int, height: int, color: Color) -> 'PixelBuffer':
        """Create a buffer filled with a single color."""
        rgba = tuple(color) + (255,) * (4 - len(color))
        arr = np.empty((height, width, 4), dtype=np.uint8)
        arr[:, :] = rgba
        return cls(arr)

    @property
    def pixels(self) -> np.ndarray:
        """The read-only ``(height, width, 4)`` array."""
        return self._pixels

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        """Return (width, height), matching Pillow's convention."""
        return (self.width, self.height)

    def get_pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        """Return the (r, g, b, a) value at column x, row y."""
        return tuple(int(v) for v in self._pixels[y, x])

    def rgb(self) -> np.ndarray:
        """Return the color channels as a signed ``(height, width, 3)`` array."""
        return self._pixels[:, :, :3].astype(np.int16)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self._pixels.copy())

    def scale(self, width: int, height: int) -> 'PixelBuffer':
        """Resize to exactly ``width`` x ``height`` using bilinear resampling."""
        if width < 1 or height < 1:
            raise PreconditionError(f"Cannot scale to {width}x{height}")
        resized = self.to_image().resize((width, height), Image.Resampling.BILINEAR)
        return PixelBuffer.from_image(resized)

    def grayscale(self) -> np.ndarray:
        """
        Return the luminance of every pixel as a ``(height, width)`` uint8 array.

        Uses ``0.299R + 0.587G + 0.114B`` truncated towards zero, computed in
        integer arithmetic so that results are exact.
        """
        rgb = self._pixels[:, :, :3].astype(np.uint32)
        gray = (rgb[:, :, 0] * 299 + rgb[:, :, 1] * 587 + rgb[:, :, 2] * 114) // 1000
        return gray.astype(np.uint8)

    def crop(self, x: int, y: int, width: int, height: int) -> 'PixelBuffer':
        """Return the rectangle starting at (x, y) with the given size."""
        if x < 0 or y < 0 or width < 1 or height < 1:
            raise PreconditionError(f"Invalid crop rectangle ({x}, {y}, {width}, {height})")
        if x + width > self.width or y + height > self.height:
            raise PreconditionError(
                f"Crop rectangle ({x}, {y}, {width}, {height}) exceeds "
                f"{self.width}x{self.height} image"
            )
        return PixelBuffer(self._pixels[y:y + height, x:x + width])

    def packed_argb(self) -> np.ndarray:
        """Return one ``uint32`` per pixel laid out as 0xAARRGGBB."""
        p = self._pixels.astype(np.uint32)
        return (p[:, :, 3] << 24) | (p[:, :, 0] << 16) | (p[:, :, 1] << 8) | p[:, :, 2]

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height})"


def load_pixel_buffer(filepath: Union[str, Path], role: Optional[str] = None) -> PixelBuffer:
    """
    Decode an image file into a PixelBuffer.

    Args:
        filepath: Path to the image file
        role: Optional label ("first", "big", ...) used in error messages

    Returns:
        Decoded RGBA PixelBuffer

    Raises:
        InputMissingError: The file does not exist
        DecodeError: The file exists but is not a decodable image
    """
    filepath = str(filepath)
    if not os.path.isfile(filepath):
        raise InputMissingError(filepath, role)

    try:
        with Image.open(filepath) as img:
            # Force load to detect truncated images early
            img.load()
            return PixelBuffer.from_image(img)
    except Image.UnidentifiedImageError as e:
        _logger.debug(f"Not a valid image file {filepath}: {e}")
        raise DecodeError(filepath, f"Not a valid image file: {e}", role) from e
    except Image.DecompressionBombError as e:
        _logger.debug(f"Image too large {filepath}: {e}")
        raise DecodeError(filepath, f"Image too large: {e}", role) from e
    except PreconditionError as e:
        raise DecodeError(filepath, str(e), role) from e
    except ValueError as e:
        _logger.debug(f"Failed to decode {filepath}: {e}")
        raise DecodeError(filepath, f"Unsupported image data: {e}", role) from e
    except OSError as e:
        _logger.debug(f"Failed to decode {filepath}: {e}")
        raise DecodeError(filepath, f"Corrupt or truncated image: {e}", role) from e


__all__ = ['PixelBuffer', 'load_pixel_buffer']
