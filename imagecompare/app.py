#!/usr/bin/env python3
"""
imagecompare HTTP server.

Serves the comparison engine as a JSON API on Flask's built-in server.

Run with: python -m imagecompare serve [--host HOST] [--port PORT] [-q | -v]
"""

import argparse
import logging

from flask import Flask

from .api import api


# Output verbosity
LOG_QUIET = 0    # errors only
LOG_MINIMAL = 1  # startup line, warnings (default)
LOG_VERBOSE = 2  # every request, debug logging


def create_app(log_level: int = LOG_MINIMAL) -> Flask:
    """
    Build the Flask application with the API blueprint registered.

    Args:
        log_level: One of LOG_QUIET, LOG_MINIMAL, LOG_VERBOSE

    Returns:
        Flask app instance
    """
    app = Flask(__name__)
    app.register_blueprint(api)

    # werkzeug logs one line per request unless told otherwise
    if log_level < LOG_VERBOSE:
        werkzeug_level = logging.ERROR if log_level == LOG_QUIET else logging.WARNING
        logging.getLogger('werkzeug').setLevel(werkzeug_level)

    return app


def _hide_startup_banner():
    try:
        import flask.cli
        flask.cli.show_server_banner = lambda *args, **kwargs: None
    except (ImportError, AttributeError):
        pass


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='imagecompare serve',
        description='Serve the imagecompare JSON API',
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument('-q', '--quiet', action='store_true',
                           help='Only print errors')
    verbosity.add_argument('-v', '--verbose', action='store_true',
                           help='Log every request and debug messages')
    parser.add_argument('--host', default='127.0.0.1',
                        help='Interface to bind (default: 127.0.0.1)')
    parser.add_argument('-p', '--port', type=int, default=5000,
                        help='Port to listen on (default: 5000)')
    return parser


def main(argv=None):
    """Parse server options and run until interrupted."""
    args = _build_parser().parse_args(argv)

    if args.quiet:
        log_level = LOG_QUIET
    elif args.verbose:
        log_level = LOG_VERBOSE
    else:
        log_level = LOG_MINIMAL

    logging.basicConfig(
        level=logging.DEBUG if log_level == LOG_VERBOSE else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    if log_level < LOG_VERBOSE:
        _hide_startup_banner()
    if log_level >= LOG_MINIMAL:
        print(f"imagecompare API listening on http://{args.host}:{args.port} (Ctrl+C to stop)")

    app = create_app(log_level)
    try:
        app.run(host=args.host, port=args.port, debug=False, threaded=True, use_reloader=False)
    except KeyboardInterrupt:
        pass


if __name__ == '__main__':
    main()
