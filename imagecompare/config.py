"""
Configuration constants for imagecompare.

This module contains all configurable settings including:
- Fingerprint grid size and comparison tolerances
- Supported image extensions for folder scans
- Defaults used by the CLI and the HTTP API
"""

import os

# Downsample resolution shared by every fingerprint in a batch (N x N)
GRID_SIZE = 16

# Two channel or grayscale values are "equal" when |a - b| <= COLOR_THRESHOLD
COLOR_THRESHOLD = 3

# Number of distinct values per color channel
MAX_COLOR = 256

# Cells per fingerprint grid
MAX_PIXEL = GRID_SIZE * GRID_SIZE

# Image extensions scanned when the caller does not pass any
IMAGE_EXTENSIONS = {
    '.jpg', '.jpeg', '.png', '.gif', '.bmp', '.webp', '.tiff', '.tif',
    '.ico', '.tga', '.ppm', '.pgm', '.pbm', '.pnm',
    '.heic', '.heif',
}

# Minimum similarity (0-100) for two images to share a similarity group
DEFAULT_SIMILARITY_THRESHOLD = 90.0

# Default number of parallel workers for fingerprinting and scans
DEFAULT_WORKERS = 4

# Color used to mark differing pixels (RGBA)
DEFAULT_HIGHLIGHT_COLOR = (255, 0, 0, 255)

# Offset reported by the sub-image locator when nothing matched
NOT_FOUND_OFFSET = (-1, -1)

# Pillow decompression bomb limit (pixels)
MAX_IMAGE_PIXELS = 500_000_000

# User configuration directory
CONFIG_DIR = os.path.join(os.path.expanduser('~'), '.imagecompare')
