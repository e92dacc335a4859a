"""
Argument parsing for the CLI interface.

Provides functions to create and configure the argument parser for the
imagecompare command-line interface. Every operation is a subcommand;
options shared between subcommands live on parent parsers.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from ..user_config import get_user_config
from ..utils.exporters import EXPORT_FORMATS


def _scan_options() -> argparse.ArgumentParser:
    """Options for commands that walk folders."""
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        '-r', '--no-recursive',
        action='store_true',
        help='Do not scan subdirectories'
    )
    parent.add_argument(
        '--ext',
        action='append',
        dest='extensions',
        metavar='EXT',
        help='Image extension to include (repeatable, e.g. --ext png --ext jpg)'
    )
    return parent


def _common_options() -> argparse.ArgumentParser:
    """Options available on every subcommand."""
    config = get_user_config()
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        '-w', '--workers',
        type=int,
        default=config.default_workers,
        help=f'Number of parallel workers. Default: {config.default_workers}'
    )
    parent.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )
    parent.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bars (useful for piping output)'
    )
    return parent


def _export_options() -> argparse.ArgumentParser:
    """Options for commands that produce groups."""
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        '-e', '--export',
        type=Path,
        help='Export results to file'
    )
    parent.add_argument(
        '--export-format',
        choices=list(EXPORT_FORMATS),
        default='txt',
        help='Export format. Default: txt'
    )
    return parent


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance with one subparser per command
    """
    config = get_user_config()
    common = _common_options()
    scan = _scan_options()
    export = _export_options()

    parser = argparse.ArgumentParser(
        prog='imagecompare',
        description='Compare images, find duplicates and locate sub-images',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s duplicates /path/to/photos
      Group images with identical fingerprints

  %(prog)s similar /path/to/photos --threshold 85
      Group images that are at least 85% similar

  %(prog)s compare a.png b.png
      Similarity score of two images

  %(prog)s locate screenshot.png button.png
      Find where button.png sits inside screenshot.png

  %(prog)s diff before.png after.png --output changes.png --color blue
      Mark every changed pixel

  %(prog)s duplicates /path/to/photos --export groups.csv --export-format csv
      Export groups to CSV for external review
        """
    )

    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    subparsers.required = True

    duplicates = subparsers.add_parser(
        'duplicates',
        parents=[common, scan, export],
        help='Find groups of duplicate images'
    )
    duplicates.add_argument('directories', type=Path, nargs='+', help='Folders to scan')

    similar = subparsers.add_parser(
        'similar',
        parents=[common, scan, export],
        help='Find groups of similar images'
    )
    similar.add_argument('directories', type=Path, nargs='+', help='Folders to scan')
    similar.add_argument(
        '-t', '--threshold',
        type=float,
        default=config.default_threshold,
        help=f'Minimum similarity percentage (0-100). Default: {config.default_threshold}'
    )

    compare = subparsers.add_parser(
        'compare',
        parents=[common],
        help='Similarity score of two images'
    )
    compare.add_argument('first', type=Path, help='First image')
    compare.add_argument('second', type=Path, help='Second image')

    locate = subparsers.add_parser(
        'locate',
        parents=[common],
        help='Find a small image inside a bigger one'
    )
    locate.add_argument('big', type=Path, help='Image to search in')
    locate.add_argument('small', type=Path, help='Image to search for')
    locate.add_argument(
        '-t', '--threshold',
        type=int,
        default=0,
        help='Allowed difference per color channel (0 = exact). Default: 0'
    )

    diff = subparsers.add_parser(
        'diff',
        parents=[common],
        help='Highlight the pixels that differ between two images'
    )
    diff.add_argument('first', type=Path, help='First image (forms the output)')
    diff.add_argument('second', type=Path, help='Second image')
    diff.add_argument(
        '-o', '--output',
        type=Path,
        required=True,
        help='Where to write the difference image'
    )
    diff.add_argument(
        '-c', '--color',
        default=None,
        help='Highlight color (name, #rrggbb or #rrggbbaa). Default: from config'
    )

    color_range = subparsers.add_parser(
        'color-range',
        parents=[common, scan],
        help='Find images whose average color is close to a given color'
    )
    color_range.add_argument('directories', type=Path, nargs='+', help='Folders to scan')
    color_range.add_argument(
        '--rgb',
        type=int,
        nargs=3,
        metavar=('R', 'G', 'B'),
        required=True,
        help='Target color'
    )
    color_range.add_argument(
        '--range',
        type=int,
        default=10,
        dest='color_range',
        help='Allowed difference per channel. Default: 10'
    )

    details = subparsers.add_parser(
        'details',
        parents=[common],
        help='Show size and average color of images'
    )
    details.add_argument('paths', type=Path, nargs='+', help='Image files')

    return parser


def parse_arguments(argv=None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: List of argument strings (default: sys.argv)

    Returns:
        Parsed arguments as Namespace object

    Examples:
        >>> args = parse_arguments(['similar', '/path/to/photos', '--threshold', '85'])
        >>> args.command
        'similar'
        >>> args.threshold
        85.0
    """
    parser = create_parser()
    return parser.parse_args(argv)


__all__ = [
    'create_parser',
    'parse_arguments',
]
