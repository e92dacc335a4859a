"""
Similarity scoring module for the engine package.

Scores two fingerprints on a 0-100 scale and scans a candidate set in
parallel for everything similar to a target fingerprint.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence

from ..config import COLOR_THRESHOLD, MAX_COLOR, DEFAULT_WORKERS
from ..models import Fingerprint
from .dependencies import np
from .fingerprint import check_same_grid


def pixel_similarity(a: Fingerprint, b: Fingerprint) -> float:
    """Percentage of grid cells whose grayscale values are within COLOR_THRESHOLD."""
    check_same_grid(a, b)
    one = np.frombuffer(a.hash, dtype=np.uint8).astype(np.int16)
    two = np.frombuffer(b.hash, dtype=np.uint8).astype(np.int16)
    matching = int(np.count_nonzero(np.abs(one - two) <= COLOR_THRESHOLD))
    return matching / len(a.hash) * 100


def color_similarity(a: Fingerprint, b: Fingerprint) -> float:
    """Mean per-channel closeness of the average colors, as a percentage."""
    channels = (
        (MAX_COLOR - abs(a.r - b.r)) / MAX_COLOR,
        (MAX_COLOR - abs(a.g - b.g)) / MAX_COLOR,
        (MAX_COLOR - abs(a.b - b.b)) / MAX_COLOR,
    )
    return sum(channels) / 3 * 100


def score_similarity(a: Fingerprint, b: Fingerprint) -> float:
    """
    Similarity between two fingerprints in the range 0-100.

    The result is the unweighted mean of the grayscale layout similarity
    and the average color similarity, so crops/resizes and flat recolors
    both score as partial matches.
    """
    return (pixel_similarity(a, b) + color_similarity(a, b)) / 2


def _chunk(items: Sequence[Fingerprint], parts: int) -> list[Sequence[Fingerprint]]:
    size = max(1, -(-len(items) // parts))
    return [items[i:i + size] for i in range(0, len(items), size)]


def _scan_chunk(target: Fingerprint, chunk: Sequence[Fingerprint], threshold: float) -> list[Fingerprint]:
    return [fp for fp in chunk if score_similarity(fp, target) >= threshold]


def find_similar_images(
    target: Fingerprint,
    candidates: Sequence[Fingerprint],
    threshold: float,
    workers: int = DEFAULT_WORKERS,
) -> Optional[list[Fingerprint]]:
    """
    Find every candidate whose similarity to ``target`` reaches ``threshold``.

    The candidate list is split into one slice per worker; each worker
    returns its own list and the lists are merged after the pool finishes.

    Args:
        target: Fingerprint to compare against
        candidates: Fingerprints to scan (may include ``target`` itself)
        threshold: Minimum similarity percentage (0-100)
        workers: Number of worker threads

    Returns:
        Matching fingerprints sorted by id, or None when fewer than two match
    """
    candidates = list(candidates)
    if not candidates:
        return None

    workers = max(1, workers)
    if workers == 1 or len(candidates) < 2 * workers:
        found = _scan_chunk(target, candidates, threshold)
    else:
        found = []
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(_scan_chunk, target, chunk, threshold)
                for chunk in _chunk(candidates, workers)
            ]
            for future in futures:
                found.extend(future.result())

    if len(found) < 2:
        return None
    return sorted(found, key=lambda fp: fp.id)


__all__ = [
    'pixel_similarity',
    'color_similarity',
    'score_similarity',
    'find_similar_images',
]
