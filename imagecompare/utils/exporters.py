"""
Export functionality for grouping results.

Provides functions to export duplicate and similarity groups to text, CSV
and JSON files.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import TextIO, Union

EXPORT_FORMATS = ('txt', 'csv', 'json')


def _export_txt(groups: list[list[str]], kind: str, file_handle: TextIO) -> None:
    """Write groups as a readable report, one path per line."""
    file_handle.write(f"{kind.upper()} IMAGE GROUPS\n")
    file_handle.write("=" * 70 + "\n\n")
    file_handle.write(f"{len(groups)} groups, {sum(len(g) for g in groups)} files\n")

    for i, group in enumerate(groups, 1):
        file_handle.write(f"\nGroup {i} ({len(group)} files):\n")
        for path in group:
            file_handle.write(f"  {path}\n")


def _export_csv(groups: list[list[str]], kind: str, file_handle: TextIO) -> None:
    """
    Write groups as CSV.

    Notes:
        CSV includes: group_id, match_type, path
    """
    writer = csv.writer(file_handle, lineterminator='\n')
    writer.writerow(['group_id', 'match_type', 'path'])
    for i, group in enumerate(groups, 1):
        for path in group:
            writer.writerow([i, kind, path])


def _export_json(groups: list[list[str]], kind: str, file_handle: TextIO) -> None:
    json.dump({'match_type': kind, 'groups': groups}, file_handle, indent=2)
    file_handle.write("\n")


def export_groups(
    groups: list[list[str]],
    output_path: Union[str, Path],
    export_format: str = 'txt',
    kind: str = 'duplicate',
) -> None:
    """
    Export grouping results to a file.

    Args:
        groups: Groups of image paths
        output_path: Path to output file
        export_format: 'txt', 'csv' or 'json'. Default: 'txt'
        kind: Label written with the groups ('duplicate' or 'similar')

    Raises:
        ValueError: If export_format is not supported
        OSError: If file cannot be written

    Examples:
        >>> export_groups([['a.png', 'b.png']], Path('results.csv'), 'csv')
    """
    if export_format not in EXPORT_FORMATS:
        raise ValueError(
            f"Unsupported export format: {export_format}. Use one of {', '.join(EXPORT_FORMATS)}."
        )

    with open(output_path, 'w', encoding='utf-8', newline='') as f:
        if export_format == 'txt':
            _export_txt(groups, kind, f)
        elif export_format == 'csv':
            _export_csv(groups, kind, f)
        else:
            _export_json(groups, kind, f)


__all__ = ['export_groups', 'EXPORT_FORMATS']
