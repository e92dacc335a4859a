"""
Grouping module for the engine package.

Provides the duplicate grouping engine (sort, then one linear scan for runs
of equal neighbours) and the similarity grouping engine (color buckets, then
threshold clusters found with the parallel scan).
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from ..config import DEFAULT_WORKERS
from ..models import Fingerprint
from .errors import OperationCancelled
from .fingerprint import is_color_equivalent, is_duplicate
from .similarity import find_similar_images

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroupingContext:
    """
    Per-call translation table from fingerprint id to source path.

    Built once when fingerprints are generated and only read afterwards,
    so it can be shared with worker threads.
    """
    paths: dict = field(default_factory=dict)

    @classmethod
    def from_paths(cls, paths: Iterable[str]) -> 'GroupingContext':
        return cls(paths=dict(enumerate(paths)))

    def path_for(self, fingerprint_id: int) -> Optional[str]:
        return self.paths.get(fingerprint_id)

    def translate(self, groups: Iterable[Sequence[int]]) -> list[list[str]]:
        """Map id groups to path groups, dropping ids with no known path."""
        result = []
        for group in groups:
            translated = [self.paths[i] for i in group if self.paths.get(i) is not None]
            result.append(translated)
        return result


def _check_cancel(cancel: Optional[threading.Event]) -> None:
    if cancel is not None and cancel.is_set():
        raise OperationCancelled("Grouping cancelled")


def group_duplicates(fingerprints: Iterable[Fingerprint]) -> list[list[int]]:
    """
    Partition fingerprints into groups of exact duplicates.

    Fingerprints are sorted by their grayscale grid bytes (row-major,
    lexicographic). A single scan then compares each item with every member
    of the current run using ``is_duplicate``; a mismatch with any of them
    closes the run, so members are pairwise duplicates. Only runs with at
    least two members become groups.

    Args:
        fingerprints: Fingerprints built with the same grid size

    Returns:
        List of id groups, each with two or more ids
    """
    ordered = sorted(fingerprints, key=lambda fp: fp.hash)

    groups: list[list[int]] = []
    current: list[Fingerprint] = []

    for fp in ordered:
        if current and not all(is_duplicate(member, fp) for member in current):
            if len(current) > 1:
                groups.append([item.id for item in current])
            current = []
        current.append(fp)

    if len(current) > 1:
        groups.append([item.id for item in current])

    _logger.debug(f"Duplicate scan: {len(ordered):,} fingerprints -> {len(groups):,} groups")
    return groups


def bucket_by_color(fingerprints: Sequence[Fingerprint]) -> list[list[Fingerprint]]:
    """
    Coarse buckets of fingerprints whose average colors are interval-equal.

    Each still-unassigned fingerprint collects every unassigned fingerprint
    color-equivalent to it (itself included). Buckets of one are dropped and
    their member stays available to later seeds.
    """
    remaining = list(fingerprints)
    buckets: list[list[Fingerprint]] = []

    for seed in fingerprints:
        if not any(item is seed for item in remaining):
            continue
        bucket = [item for item in remaining if is_color_equivalent(seed, item)]
        if len(bucket) < 2:
            continue
        taken = {id(item) for item in bucket}
        remaining = [item for item in remaining if id(item) not in taken]
        buckets.append(bucket)

    return buckets


def group_similar(
    fingerprints: Sequence[Fingerprint],
    threshold: float,
    workers: int = DEFAULT_WORKERS,
    cancel: Optional[threading.Event] = None,
) -> list[list[int]]:
    """
    Group fingerprints whose similarity reaches ``threshold``.

    Fingerprints are first bucketed by average color. Inside a bucket every
    fingerprint still remaining is used as a target for
    ``find_similar_images``; each cluster found is removed from the bucket
    before the next target, so no fingerprint lands in two groups.

    Args:
        fingerprints: Fingerprints built with the same grid size
        threshold: Minimum similarity percentage (0-100)
        workers: Worker threads for the candidate scan
        cancel: Optional event; when set the scan stops with OperationCancelled

    Returns:
        List of id groups, each with two or more ids
    """
    buckets = bucket_by_color(fingerprints)
    _logger.debug(f"Similarity scan: {len(buckets):,} color buckets")

    groups: list[list[int]] = []
    for bucket in buckets:
        remaining = list(bucket)
        for target in bucket:
            _check_cancel(cancel)
            if not any(item is target for item in remaining):
                continue
            cluster = find_similar_images(target, remaining, threshold, workers=workers)
            if cluster is None:
                continue
            taken = {id(item) for item in cluster}
            remaining = [item for item in remaining if id(item) not in taken]
            groups.append([item.id for item in cluster])

    return groups


__all__ = [
    'GroupingContext',
    'group_duplicates',
    'bucket_by_color',
    'group_similar',
]
