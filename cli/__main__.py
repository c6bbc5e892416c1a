"""``python -m cli`` -- chat with a running relay from the terminal."""

import argparse
import asyncio
import sys

from .relay_cli import main


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="persona-relay-cli",
        description="Interactive terminal client for POST /api/chat",
    )
    parser.add_argument("--host", default="localhost", help="relay host")
    parser.add_argument("--port", type=int, default=3456, help="relay port")
    parser.add_argument(
        "--api-path", default="/api/chat", help="path of the chat endpoint"
    )
    parser.add_argument(
        "--session-id",
        default=None,
        help="continue an existing conversation instead of starting a new one",
    )
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    return parser


def cli_entry(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        asyncio.run(
            main(
                host=args.host,
                port=args.port,
                api_path=args.api_path,
                session_id=args.session_id,
                debug=args.debug,
            )
        )
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    cli_entry()
