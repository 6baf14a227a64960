"""Command line entry point: ``flipnews serve`` and ``flipnews read``."""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from .config import BaseConfig, ReaderConfig


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flipnews", description="FlipNews proxy and terminal reader")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the TheNewsApi proxy")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=None, help="defaults to $PORT or 5177")
    serve.add_argument("--debug", action="store_true")

    read = sub.add_parser("read", help="browse news one card at a time")
    read.add_argument("--api", default=None, help="proxy base URL (defaults to $FLIPNEWS_API_BASE)")
    group = read.add_mutually_exclusive_group()
    group.add_argument("-c", "--category", default=None)
    group.add_argument("-s", "--search", default=None)
    read.add_argument("--storage", default=None, help="favorites file (defaults to $FLIPNEWS_STORAGE)")
    read.add_argument("--stop-at-end", action="store_true",
                      help="disable next once a page comes back empty")
    return parser


def serve(args: argparse.Namespace) -> None:
    from . import create_app

    config = BaseConfig()
    if args.port is not None:
        config.PORT = args.port
    app = create_app(config)
    logger.info(f"Server running on http://{args.host}:{config.PORT}")
    app.run(host=args.host, port=config.PORT, debug=args.debug)


def read(args: argparse.Namespace) -> None:
    from .client.reader import run_reader

    config = ReaderConfig()
    if args.api:
        config.API_BASE = args.api
    if args.storage:
        config.STORAGE_PATH = Path(args.storage).expanduser()
    if args.stop_at_end:
        config.REFETCH_PAST_END = False
    asyncio.run(run_reader(config, category=args.category, search=args.search))


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    if args.command == "serve":
        serve(args)
    else:
        try:
            read(args)
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
