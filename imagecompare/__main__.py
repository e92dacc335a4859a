"""
Allow running the package with: python -m imagecompare

By default, runs the command-line interface. Use 'serve' to start the HTTP
API and 'config' to inspect or create the user configuration.

Examples:
    python -m imagecompare duplicates /path/to/photos  # CLI
    python -m imagecompare compare a.png b.png          # CLI
    python -m imagecompare serve --port 8080            # HTTP API
    python -m imagecompare config --init                # Create example config file
"""

import sys


def _show_config(argv) -> int:
    from .user_config import get_user_config

    config = get_user_config()

    if '--init' in argv or '-i' in argv:
        if config.create_example_config():
            print("Created example configuration file at:")
            print(f"  {config.config_file_path}")
            print("\nEdit this file to customize imagecompare settings.")
            return 0
        print("Failed to create configuration file.")
        return 1

    print(f"Configuration file: {config.config_file_path}")
    if config.config_file_path.exists():
        print("Status: found")
    else:
        print("Status: not found (using defaults)")
        print("\nRun 'python -m imagecompare config --init' to create one.")

    print("\nCurrent settings:")
    print(f"  default_threshold: {config.default_threshold}")
    print(f"  default_workers: {config.default_workers}")
    print(f"  max_image_pixels: {config.max_image_pixels:,}")
    print(f"  highlight_color: {config.highlight_color}")
    return 0


def main(argv=None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    if argv and argv[0] == 'serve':
        from .app import main as serve_main
        serve_main(argv[1:])
        return 0
    if argv and argv[0] == 'config':
        return _show_config(argv[1:])

    from .cli import main as cli_main
    return cli_main(argv)


if __name__ == '__main__':
    sys.exit(main())
