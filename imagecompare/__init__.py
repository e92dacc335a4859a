"""
imagecompare
============
Image fingerprinting, duplicate detection and sub-image location.

Features:
- 16x16 fingerprints (average color + grayscale grid)
- Exact duplicate groups via sort-then-scan
- Similarity groups above a percentage threshold
- Pairwise similarity scores with image descriptors
- Sub-image (cut-out) location with border precheck
- Pixel difference highlighting
- CLI and JSON HTTP API
"""

__version__ = "1.0.0"

from .models import Fingerprint, CompareResult, SubImageMatch, ImageDetails
from .config import GRID_SIZE, COLOR_THRESHOLD, MAX_COLOR, MAX_PIXEL, IMAGE_EXTENSIONS
from .engine import (
    ImageCompareError,
    InputMissingError,
    DecodeError,
    PreconditionError,
    OperationCancelled,
    PixelBuffer,
    load_pixel_buffer,
    generate_fingerprint,
    score_similarity,
    is_duplicate,
    is_color_equivalent,
    group_duplicates,
    group_similar,
    find_duplicate_groups,
    find_similar_groups,
    compare_images,
    find_sub_image,
    find_sub_image_in_files,
    highlight_diff,
    highlight_differences,
    find_images_in_color_range,
)

__all__ = [
    "Fingerprint",
    "CompareResult",
    "SubImageMatch",
    "ImageDetails",
    "GRID_SIZE",
    "COLOR_THRESHOLD",
    "MAX_COLOR",
    "MAX_PIXEL",
    "IMAGE_EXTENSIONS",
    "ImageCompareError",
    "InputMissingError",
    "DecodeError",
    "PreconditionError",
    "OperationCancelled",
    "PixelBuffer",
    "load_pixel_buffer",
    "generate_fingerprint",
    "score_similarity",
    "is_duplicate",
    "is_color_equivalent",
    "group_duplicates",
    "group_similar",
    "find_duplicate_groups",
    "find_similar_groups",
    "compare_images",
    "find_sub_image",
    "find_sub_image_in_files",
    "highlight_diff",
    "highlight_differences",
    "find_images_in_color_range",
]
