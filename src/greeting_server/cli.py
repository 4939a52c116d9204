#!/usr/bin/env python3
"""
Greeting server CLI

Usage:
    python -m greeting_server              # FastAPI/uvicorn
    python -m greeting_server --stdlib     # stdlib http.server
"""

import argparse
import logging
import signal
import sys

from .core import Config, setup_logging
from .listener import BindError

logger = logging.getLogger(__name__)


def _raise_keyboard_interrupt(signum, frame):
    raise KeyboardInterrupt


def run(use_stdlib: bool = False) -> int:
    """Start the selected backend on the fixed address. Returns an exit code."""
    # Both backends exit cleanly on KeyboardInterrupt; treat SIGTERM the same
    signal.signal(signal.SIGTERM, _raise_keyboard_interrupt)

    if use_stdlib:
        from .stdlib_server import serve as stdlib_serve

        return stdlib_serve(Config.HOST, Config.PORT)

    from .listener import serve

    return serve(Config.HOST, Config.PORT, Config.LOG_LEVEL)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Greeting server - fixed greeting endpoints on 127.0.0.1:3000",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Routes:
  GET /          Hello, World!
  GET /evening   Good evening
        """
    )
    parser.add_argument(
        "--stdlib", "-s",
        action="store_true",
        help="Serve with stdlib http.server instead of FastAPI/uvicorn"
    )

    args = parser.parse_args(argv)
    setup_logging()

    try:
        return run(use_stdlib=args.stdlib)
    except BindError as e:
        logger.debug(f"Bind failed: {e.cause!r}")
        print(f"[ERROR] {e}", file=sys.stderr)
        print("Stop the process that holds the port and try again.", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
