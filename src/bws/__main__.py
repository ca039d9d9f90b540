"""
=============================================================================
BWS COMMAND LINE INTERFACE
=============================================================================

Entry point for running the server from the command line.

=============================================================================
USAGE
=============================================================================

    python -m bws PORT [options]
    bws PORT [options]              (console script)

Examples:
    python -m bws 8080                          # serve ./www on :8080
    python -m bws 8080 --root ./public          # another document root
    python -m bws 0 --log-level DEBUG           # any free port, trace requests

Exit status 1 if the port is not a number, is outside 0-65535 or cannot be
bound.

=============================================================================
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .config import LOG_LEVELS, ServerConfig
from .server import HTTPServer


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser; defaults come from the environment."""
    defaults = ServerConfig.from_env()

    parser = argparse.ArgumentParser(
        prog="bws",
        description="Basic web server: serves GET, HEAD and TRACE from a document root",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m bws 8080                     # Serve ./www on port 8080
  python -m bws 8080 --root ./public     # Custom document root
  python -m bws 8080 --host 127.0.0.1    # Local connections only
        """
    )

    parser.add_argument(
        "port",
        help="Port to listen on (0-65535, 0 picks a free port)"
    )

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Address to bind (default: {defaults.host})"
    )

    parser.add_argument(
        "--root", "-r",
        default=defaults.document_root,
        help=f"Document root directory (default: {defaults.document_root})"
    )

    parser.add_argument(
        "--access-log", "-a",
        default=defaults.access_log,
        help=f"Access log file (default: {defaults.access_log})"
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default=defaults.log_level.upper(),
        help=f"Diagnostic logging level (default: {defaults.log_level.upper()})"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"bws {__version__}"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Parse arguments, bind and serve.

    Returns:
        Process exit status.
    """
    try:
        parser = build_parser()
    except ValueError as e:
        # A malformed BWS_PORT in the environment.
        print(f"Invalid environment configuration: {e}", file=sys.stderr)
        return 1

    args = parser.parse_args(argv)

    try:
        port = int(args.port)
    except ValueError:
        print("Port number given is not a number.", file=sys.stderr)
        return 1

    config = ServerConfig(
        host=args.host,
        port=port,
        document_root=args.root,
        access_log=args.access_log,
        log_level=args.log_level,
    )

    try:
        server = HTTPServer(config)
    except ValueError as e:
        print(f"{e}", file=sys.stderr)
        return 1

    server.setup_logging()

    try:
        server.bind()
    except OSError as e:
        print(f"Cannot listen on port {port}: {e}", file=sys.stderr)
        return 1

    server.run(setup_logging=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
