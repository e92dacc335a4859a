"""
Data models for imagecompare.

Contains dataclasses for fingerprints, comparison results, sub-image matches
and per-image details.
"""

from dataclasses import dataclass
import os

import numpy as np

from .config import GRID_SIZE, NOT_FOUND_OFFSET


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable form."""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} TB"


@dataclass(frozen=True, eq=False)
class Fingerprint:
    """
    Compact comparable representation of one image.

    Fingerprints deliberately keep identity equality. Use
    ``is_duplicate`` or ``is_color_equivalent`` from the engine to compare
    two of them.

    Attributes:
        id: Caller-assigned identifier (index into the source path list)
        r: Average red value over the downsampled grid
        g: Average green value over the downsampled grid
        b: Average blue value over the downsampled grid
        hash: Grayscale value per grid cell, row-major (grid_size**2 bytes)
        grid_size: Side length N of the downsampled grid
    """
    id: int
    r: int
    g: int
    b: int
    hash: bytes
    grid_size: int = GRID_SIZE

    @property
    def grid(self) -> np.ndarray:
        """Return the grayscale hash as an N x N array (rows first)."""
        return np.frombuffer(self.hash, dtype=np.uint8).reshape(self.grid_size, self.grid_size)

    @property
    def average_color(self) -> tuple[int, int, int]:
        """Return the average color as an (r, g, b) tuple."""
        return (self.r, self.g, self.b)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'average_color': list(self.average_color),
            'grid_size': self.grid_size,
            'hash': self.hash.hex(),
        }


@dataclass(frozen=True)
class CompareResult:
    """
    Result of comparing two images.

    Attributes:
        similarity: Similarity percentage (0-100)
        descriptor_a: Human-readable description of the first image
        descriptor_b: Human-readable description of the second image
    """
    similarity: float
    descriptor_a: str
    descriptor_b: str

    def to_dict(self) -> dict:
        return {
            'similarity': round(self.similarity, 2),
            'descriptor_a': self.descriptor_a,
            'descriptor_b': self.descriptor_b,
        }


@dataclass(frozen=True)
class SubImageMatch:
    """
    Where a small image sits inside a bigger one.

    ``offset`` is the (x, y) top-left pixel in the big image and is only
    meaningful when ``found`` is True.
    """
    found: bool
    offset: tuple[int, int] = NOT_FOUND_OFFSET

    @classmethod
    def not_found(cls) -> 'SubImageMatch':
        return cls(found=False, offset=NOT_FOUND_OFFSET)

    def to_dict(self) -> dict:
        return {
            'found': self.found,
            'x': self.offset[0],
            'y': self.offset[1],
        }


@dataclass
class ImageDetails:
    """
    Stores metadata about an image and its average color.

    Attributes:
        path: Full path to the image file (empty for in-memory buffers)
        width: Image width in pixels
        height: Image height in pixels
        file_size: Size in bytes
        r: Average red value of the fingerprint grid
        g: Average green value of the fingerprint grid
        b: Average blue value of the fingerprint grid
        similarity: Similarity to a reference image (100 for the reference)
    """
    path: str = ""
    width: int = 0
    height: int = 0
    file_size: int = 0
    r: int = 0
    g: int = 0
    b: int = 0
    similarity: float = 100.0

    @property
    def name(self) -> str:
        """Return just the filename portion of the path."""
        return os.path.basename(self.path)

    @property
    def extension(self) -> str:
        """Return the file extension including the dot."""
        return os.path.splitext(self.path)[1]

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def file_size_formatted(self) -> str:
        """Return human-readable file size."""
        return format_size(self.file_size)

    def describe(self) -> str:
        """Full description including path and name."""
        return (
            f"Path: {self.path}, Name: {self.name}, Height: {self.height}, "
            f"Width: {self.width}, Size: {self.pixel_count}"
        )

    def describe_simple(self) -> str:
        """Description of the dimensions only."""
        return f"Height: {self.height}, Width: {self.width}, Size: {self.pixel_count}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'path': self.path,
            'name': self.name,
            'extension': self.extension,
            'width': self.width,
            'height': self.height,
            'file_size': self.file_size,
            'file_size_formatted': self.file_size_formatted,
            'average_color': [self.r, self.g, self.b],
            'similarity': round(self.similarity, 2),
        }
