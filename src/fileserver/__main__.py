"""
=============================================================================
FILE SERVER CLI ENTRY POINT
=============================================================================

    # Serve ./www on localhost:8080
    python -m fileserver

    # Custom port and document root
    python -m fileserver --port 3000 --root ./public

    # Listen on all interfaces (for containers)
    python -m fileserver --host 0.0.0.0

Environment variables (HTTP_HOST, HTTP_PORT, HTTP_DOCUMENT_ROOT,
HTTP_WORKERS, HTTP_LOG_LEVEL) provide the defaults; flags override them.

=============================================================================
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .config import ServerConfig
from .server import FileServer


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fileserver",
        description="Minimal HTTP/1.1 file server: GET/HEAD/POST/PUT/DELETE below a document root",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m fileserver                        # ./www on 127.0.0.1:8080
  python -m fileserver --port 3000            # Custom port
  python -m fileserver --root ./public        # Different document root
  python -m fileserver --host 0.0.0.0 -w 8    # All interfaces, 8 workers
        """,
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})",
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})",
    )

    # ─────────────────────────────────────────────────────────────────────
    # FILE STORE / PERFORMANCE
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--root", "-r",
        default=defaults.document_root,
        help=f"Document root directory (default: {defaults.document_root})",
    )

    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=defaults.min_workers,
        help=f"Number of worker threads (default: {defaults.min_workers}, max will be 2x this)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING / META
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level.upper()})",
    )

    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Write access log lines as JSON",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"fileserver {__version__}",
    )

    return parser


def config_from_args(argv: Optional[List[str]] = None) -> ServerConfig:
    """Build a ServerConfig from environment defaults and CLI flags."""
    defaults = ServerConfig.from_env()
    args = build_parser(defaults).parse_args(argv)

    return ServerConfig(
        host=args.host,
        port=args.port,
        document_root=args.root,
        min_workers=args.workers,
        max_workers=max(args.workers * 2, defaults.max_workers),
        log_level=args.log_level,
        access_log_format="json" if args.json_logs else "text",
    )


def main(argv: Optional[List[str]] = None) -> int:
    try:
        config = config_from_args(argv)
        server = FileServer(config)
        server.run()
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
