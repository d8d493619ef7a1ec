"""
Command-line client

Sends one raw command to the store and prints the response blocks:

    ssdb-cli --host 127.0.0.1 --port 8888 set greeting hello
"""
import argparse
import logging
import sys
from typing import List, Optional

import structlog

from ssdb_client.commands import STATUS_OK
from ssdb_client.config import settings
from ssdb_client.connection import Connection
from ssdb_client.exceptions import SSDBError
from ssdb_client.logging import setup_logging

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Send one command to an SSDB server")
    parser.add_argument("--host", default=settings.host, help="Server host")
    parser.add_argument("--port", type=int, default=settings.port, help="Server port")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Connect and read timeout in seconds (default: block)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log verbosity",
    )
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Print blocks as Python byte literals instead of decoded text",
    )
    parser.add_argument("command", help="Command name, e.g. get")
    parser.add_argument("args", nargs="*", help="Command arguments")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("cli", level=getattr(logging, args.log_level))

    try:
        with Connection.open(
            args.host,
            args.port,
            connect_timeout=args.timeout,
            read_timeout=args.timeout,
        ) as conn:
            blocks = conn.request(args.command, *args.args)
    except SSDBError as e:
        logger.error("command_failed", command=args.command, error=e.message, kind=e.kind.value)
        print(f"error: {e.message}", file=sys.stderr)
        return 1

    for block in blocks:
        if args.raw:
            print(repr(block))
        else:
            print(block.decode(settings.encoding, "replace"))

    return 0 if blocks and blocks[0] == STATUS_OK else 1


if __name__ == "__main__":
    sys.exit(main())
