"""Command-line entry point that starts the server."""

from __future__ import annotations

import argparse
import sys

from gvalkey.config import ConfigError, load
from gvalkey.logsetup import new_logger
from gvalkey.server import Server


def main(argv: list[str] | None = None) -> int:
    """Start the server configured from the environment; return an exit status."""
    parser = argparse.ArgumentParser(
        prog="gvalkey",
        description=(
            "In-memory key-value server speaking RESP. "
            "Configured through GVK_HOST, GVK_PORT and GVK_LOG_LEVEL."
        ),
    )
    parser.parse_args(argv)

    try:
        config = load()
    except ConfigError as exc:
        print(f"failed to load config: {exc}", file=sys.stderr)
        return 1

    logger = new_logger(config.log_level)
    server = Server(config.host, config.port, logger=logger)
    try:
        server.serve_forever()
    except OSError as exc:
        logger.error("failed to start server error=%s", exc)
        return 1
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())