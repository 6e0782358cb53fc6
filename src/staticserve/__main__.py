#!/usr/bin/env python3
"""
Serve a directory over HTTP(S) from the command line.
"""

import argparse
import asyncio
import logging
import sys

from .config import ServerConfig
from .server import serve_forever

logger = logging.getLogger("staticserve")


def configure_logging(level: str, quiet: bool = False):
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )
    if quiet:
        # --quiet silences diagnostics too, errors included
        logging.getLogger().setLevel(logging.CRITICAL + 1)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="staticserve", description=__doc__)
    parser.add_argument("root", nargs="?", default=".", help="Directory to serve (default: %(default)s)")
    parser.add_argument("--port", "-p", type=int, default=None, help="Port to try first (default: $APP_PORT or 8000)")
    parser.add_argument("--host", default=None, help="Interface to bind (default: $APP_HOST or 0.0.0.0)")
    parser.add_argument("--https", action="store_true", help="Serve over TLS")
    parser.add_argument("--project-root", default=None, help="Second directory served after ROOT")
    parser.add_argument("--no-server-info", action="store_true", help="Don't print the running message")
    parser.add_argument("--quiet", "-q", action="store_true", help="Suppress all log output")
    parser.add_argument("--max-port-attempts", type=int, default=None, help="Ports to try before giving up")
    parser.add_argument("--log-level", default=None, help="Diagnostics level (default: $LOG_LEVEL or INFO)")
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Only pass options that were given so env defaults still apply"""
    overrides = {
        "root": args.root,
        "project_root": args.project_root,
        "port": args.port,
        "use_https": args.https,
        "no_server_info": args.no_server_info,
        "no_log_output": args.quiet,
    }
    if args.host is not None:
        overrides["host"] = args.host
    if args.max_port_attempts is not None:
        overrides["max_port_attempts"] = args.max_port_attempts
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    return ServerConfig(**overrides)


def main(argv=None) -> int:
    args = parse_args(argv)
    config = config_from_args(args)
    configure_logging(config.log_level, quiet=config.no_log_output)

    try:
        asyncio.run(serve_forever(config))
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")
    except OSError as e:
        logger.error(f"Failed to start static file server: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
