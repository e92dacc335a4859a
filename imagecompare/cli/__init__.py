"""
CLI package for imagecompare.

Provides the command-line interface for duplicate and similarity grouping,
pairwise comparison, sub-image location and difference highlighting.

Public API:
- main: Entry point for CLI execution
- CLIOrchestrator: CLI workflow orchestration class
- print_group_report: Function to display grouping results
"""

from __future__ import annotations

from typing import Optional

from .orchestrator import CLIOrchestrator, setup_logging
from .arg_parser import create_parser, parse_arguments
from .reporting import (
    print_group_report,
    print_compare_result,
    print_sub_image_match,
    print_image_details,
    print_path_list,
)


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Delegates to CLIOrchestrator to execute the complete workflow.

    Returns:
        Exit code (0 for success, 1 for error)

    Examples:
        >>> # Called from __main__.py
        >>> exit_code = main()
        >>> sys.exit(exit_code)
    """
    orchestrator = CLIOrchestrator(argv)
    return orchestrator.run()


__all__ = [
    # Main entry point
    'main',
    # Core classes
    'CLIOrchestrator',
    # Utilities
    'setup_logging',
    'create_parser',
    'parse_arguments',
    'print_group_report',
    'print_compare_result',
    'print_sub_image_match',
    'print_image_details',
    'print_path_list',
]
