"""
CLI workflow orchestration for imagecompare.

Provides the CLIOrchestrator class that coordinates a CLI run from argument
parsing through validation, execution and final reporting.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..engine import (
    ImageCompareError,
    find_duplicate_groups,
    find_similar_groups,
    compare_images,
    find_sub_image_in_files,
    highlight_differences,
    find_images_in_color_range,
    get_image_details_batch,
)
from ..user_config import get_user_config
from ..utils.exporters import export_groups
from ..utils.validators import (
    validate_directories,
    validate_file,
    validate_threshold,
    validate_channel_tolerance,
    validate_rgb,
    validate_workers,
)
from .arg_parser import parse_arguments
from .reporting import (
    print_group_report,
    print_compare_result,
    print_sub_image_match,
    print_image_details,
    print_path_list,
)


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for the CLI.

    Args:
        verbose: Enable verbose (DEBUG level) logging

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    return logging.getLogger(__name__)


class CLIOrchestrator:
    """
    Orchestrates a CLI run.

    Parses arguments, validates them for the chosen subcommand, runs the
    matching engine operation and prints the report.
    """

    def __init__(self, argv: Optional[list[str]] = None):
        """
        Initialize the orchestrator.

        Args:
            argv: Argument list (default: sys.argv)
        """
        self.argv = argv
        self.logger = None
        self.args = None
        self.show_progress = True

    def run(self) -> int:
        """
        Execute the CLI workflow.

        Returns:
            Exit code (0 for success, 1 for error)

        Workflow phases:
        1. Setup & argument parsing
        2. Validation
        3. Execution & reporting
        """
        # Phase 1: Setup
        self._setup_phase()

        # Phase 2: Validation
        exit_code = self._validate_phase()
        if exit_code != 0:
            return exit_code

        # Phase 3: Execution
        handlers = {
            'duplicates': self._run_duplicates,
            'similar': self._run_similar,
            'compare': self._run_compare,
            'locate': self._run_locate,
            'diff': self._run_diff,
            'color-range': self._run_color_range,
            'details': self._run_details,
        }
        try:
            return handlers[self.args.command]()
        except ImageCompareError as e:
            self.logger.error(str(e))
            return 1
        except OSError as e:
            self.logger.error(f"I/O error: {e}")
            return 1

    def _setup_phase(self) -> None:
        """Phase 1: Parse arguments and setup logging."""
        self.args = parse_arguments(self.argv)
        self.logger = setup_logging(self.args.verbose)
        self.show_progress = not self.args.no_progress

    def _validate_phase(self) -> int:
        """
        Phase 2: Validate arguments for the chosen command.

        Returns:
            0 for success, 1 for validation error
        """
        args = self.args
        checks = [validate_workers(args.workers)]

        if hasattr(args, 'directories'):
            checks.append(validate_directories(str(d) for d in args.directories))
        if args.command == 'similar':
            checks.append(validate_threshold(args.threshold))
        if args.command == 'locate':
            checks.append(validate_channel_tolerance(args.threshold, 'Threshold'))
        if args.command == 'color-range':
            checks.append(validate_rgb(*args.rgb))
            checks.append(validate_channel_tolerance(args.color_range, 'Range'))
        if args.command in ('compare', 'diff'):
            checks.append(validate_file(str(args.first)))
            checks.append(validate_file(str(args.second)))
        if args.command == 'locate':
            checks.append(validate_file(str(args.big)))
            checks.append(validate_file(str(args.small)))

        for is_valid, error in checks:
            if not is_valid:
                self.logger.error(error)
                return 1
        return 0

    def _paths(self) -> list[str]:
        return [str(d) for d in self.args.directories]

    def _export(self, groups: Optional[list[list[str]]], kind: str) -> None:
        """Export groups if requested."""
        if not self.args.export:
            return
        export_groups(groups or [], self.args.export, self.args.export_format, kind=kind)
        self.logger.info(f"Results exported to: {self.args.export}")

    def _run_duplicates(self) -> int:
        self.logger.info(f"Finding duplicates in {', '.join(self._paths())}...")
        groups = find_duplicate_groups(
            self._paths(),
            recurse_subfolders=not self.args.no_recursive,
            extensions=self.args.extensions,
            max_workers=self.args.workers,
            show_progress=self.show_progress,
        )
        if groups is None:
            self.logger.info("No images found. Exiting.")
            return 1

        print_group_report(groups, "DUPLICATE IMAGE REPORT")
        self._export(groups, 'duplicate')
        return 0

    def _run_similar(self) -> int:
        self.logger.info(
            f"Finding similar images in {', '.join(self._paths())} "
            f"(threshold={self.args.threshold})..."
        )
        groups = find_similar_groups(
            self._paths(),
            recurse_subfolders=not self.args.no_recursive,
            extensions=self.args.extensions,
            threshold=self.args.threshold,
            max_workers=self.args.workers,
            show_progress=self.show_progress,
        )
        print_group_report(groups, "SIMILAR IMAGE REPORT")
        self._export(groups, 'similar')
        return 0

    def _run_compare(self) -> int:
        result = compare_images(self.args.first, self.args.second)
        print_compare_result(result)
        return 0

    def _run_locate(self) -> int:
        match = find_sub_image_in_files(self.args.big, self.args.small, threshold=self.args.threshold)
        print_sub_image_match(match)
        return 0

    def _run_diff(self) -> int:
        color = self.args.color or get_user_config().highlight_color
        result = highlight_differences(self.args.first, self.args.second, color)
        try:
            result.to_image().save(self.args.output)
        except (ValueError, OSError) as e:
            # Pillow raises ValueError when the extension names no known format
            self.logger.error(f"Cannot write {self.args.output}: {e}")
            return 1
        self.logger.info(f"Difference image written to: {self.args.output}")
        return 0

    def _run_color_range(self) -> int:
        r, g, b = self.args.rgb
        matches = find_images_in_color_range(
            r, g, b,
            self.args.color_range,
            self._paths(),
            recurse_subfolders=not self.args.no_recursive,
            extensions=self.args.extensions,
        )
        if matches is None:
            self.logger.info("No images found. Exiting.")
            return 1
        print_path_list(matches, f"IMAGES NEAR RGB({r}, {g}, {b}) +/- {self.args.color_range}")
        return 0

    def _run_details(self) -> int:
        details = get_image_details_batch([str(p) for p in self.args.paths])
        if details is None:
            self.logger.error("Could not read every image")
            return 1
        print_image_details(details)
        return 0


__all__ = ['CLIOrchestrator', 'setup_logging']
