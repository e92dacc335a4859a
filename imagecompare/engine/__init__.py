"""
Engine package for imagecompare.

Provides fingerprinting, similarity scoring, duplicate and similarity
grouping, sub-image location and pixel difference highlighting.

Public API:
- PixelBuffer / load_pixel_buffer: Decoded RGBA images
- generate_fingerprint: Average color + grayscale grid of an image
- is_duplicate / is_color_equivalent: Interval-equality predicates
- score_similarity / find_similar_images: 0-100 similarity
- group_duplicates / group_similar: Grouping engines over fingerprints
- find_duplicate_groups / find_similar_groups: Folder-level grouping
- find_sub_image / find_sub_image_in_files: Sub-image locator
- highlight_diff / highlight_differences: Pixel difference image
- compare_images, get_image_details, get_colors, get_image_colors,
  find_images_in_color_range
- has_heif_support: Check if HEIC/HEIF support is available
"""

from __future__ import annotations

from .errors import (
    ImageCompareError,
    InputMissingError,
    DecodeError,
    PreconditionError,
    OperationCancelled,
)
from .pixels import PixelBuffer, load_pixel_buffer
from .file_discovery import find_image_files, normalize_extensions
from .fingerprint import (
    interval_equal,
    generate_fingerprint,
    is_color_equivalent,
    is_duplicate,
)
from .similarity import score_similarity, find_similar_images
from .grouping import GroupingContext, group_duplicates, group_similar
from .batch import fingerprint_files, find_duplicate_groups, find_similar_groups
from .locator import find_sub_image, find_sub_image_in_files
from .difference import highlight_diff, highlight_differences, parse_color
from .analysis import (
    compare_buffers,
    compare_images,
    get_image_details,
    get_image_details_batch,
    get_colors,
    get_image_colors,
    find_images_in_color_range,
)

# Import dependencies for has_heif_support function
from .dependencies import HAS_HEIF_SUPPORT


def has_heif_support() -> bool:
    """Check if HEIC/HEIF support is available."""
    return HAS_HEIF_SUPPORT


# Public API exports
__all__ = [
    # Errors
    'ImageCompareError',
    'InputMissingError',
    'DecodeError',
    'PreconditionError',
    'OperationCancelled',
    # Pixel buffers
    'PixelBuffer',
    'load_pixel_buffer',
    # File discovery
    'find_image_files',
    'normalize_extensions',
    # Fingerprints
    'interval_equal',
    'generate_fingerprint',
    'is_color_equivalent',
    'is_duplicate',
    # Similarity
    'score_similarity',
    'find_similar_images',
    # Grouping
    'GroupingContext',
    'group_duplicates',
    'group_similar',
    'fingerprint_files',
    'find_duplicate_groups',
    'find_similar_groups',
    # Sub-image
    'find_sub_image',
    'find_sub_image_in_files',
    # Difference
    'highlight_diff',
    'highlight_differences',
    'parse_color',
    # Analysis
    'compare_buffers',
    'compare_images',
    'get_image_details',
    'get_image_details_batch',
    'get_colors',
    'get_image_colors',
    'find_images_in_color_range',
    # Feature detection
    'has_heif_support',
]
