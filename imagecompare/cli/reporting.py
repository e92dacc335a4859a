"""
Report formatting and display for the CLI interface.

Provides functions to print grouping results, comparisons, sub-image
matches and image details in a human-readable format.
"""

from __future__ import annotations

from typing import Optional

from ..models import CompareResult, ImageDetails, SubImageMatch


def _print_section_header(title: str) -> None:
    """Print a section header with divider lines."""
    print("\n" + "=" * 70)
    print(title)
    print("=" * 70)


def print_group_report(groups: Optional[list[list[str]]], title: str) -> None:
    """
    Print groups of image paths.

    Args:
        groups: Groups of paths, or None when nothing could be scanned
        title: Report title (e.g. "DUPLICATE IMAGE REPORT")

    Notes:
        - Groups are numbered starting from 1
        - Paths are printed in group order
    """
    _print_section_header(title)

    if not groups:
        print("\nNo groups found.")
        return

    total_files = sum(len(g) for g in groups)
    print(f"\n{total_files} files in {len(groups)} groups")

    for i, group in enumerate(groups, 1):
        print(f"\nGroup {i} ({len(group)} files):")
        for path in group:
            print(f"  {path}")


def print_compare_result(result: CompareResult) -> None:
    """Print both descriptors and the similarity score."""
    print(f"A: {result.descriptor_a}")
    print(f"B: {result.descriptor_b}")
    print(f"Similarity: {result.similarity:.2f}%")


def print_sub_image_match(match: SubImageMatch) -> None:
    if match.found:
        x, y = match.offset
        print(f"Found at x={x}, y={y}")
    else:
        print("Not found")


def print_image_details(details: list[ImageDetails]) -> None:
    """
    Print one block per image.

    Similarity is shown relative to the first image when more than one
    image was given.
    """
    for info in details:
        print(f"\n{info.path}")
        print(f"  {info.width}x{info.height} | {info.file_size_formatted} | "
              f"Average color: ({info.r}, {info.g}, {info.b})")
        if len(details) > 1:
            print(f"  Similarity to first: {info.similarity:.2f}%")


def print_path_list(paths: Optional[list[str]], title: str) -> None:
    _print_section_header(title)
    if not paths:
        print("\nNo matching images.")
        return
    print(f"\n{len(paths)} matching images:")
    for path in paths:
        print(f"  {path}")


__all__ = [
    'print_group_report',
    'print_compare_result',
    'print_sub_image_match',
    'print_image_details',
    'print_path_list',
]
