from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime

import orjson

from .config import get_settings
from .domain import UserRole
from .logging import configure_logging
from .suggestions import match_suggestions


def _timestamp(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise argparse.ArgumentTypeError("start must be an ISO 8601 timestamp") from exc


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings().server
    parser = argparse.ArgumentParser(description="HomeHQ command line interface.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Start the suggestion function HTTP server.")
    serve_parser.add_argument("--host", default=settings.host)
    serve_parser.add_argument("--port", type=int, default=settings.port)

    suggest_parser = subparsers.add_parser("suggest", help="Print task suggestions for an event title.")
    suggest_parser.add_argument("--title", required=True)
    suggest_parser.add_argument("--start", required=True, type=_timestamp, help="Event start, ISO 8601.")
    suggest_parser.add_argument("--role", choices=[role.value for role in UserRole], default=UserRole.MEMBER.value)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        from .services.http import run_local_server

        log_file = configure_logging()
        logging.getLogger(__name__).info("HomeHQ CLI starting, logging to %s", log_file)
        run_local_server(host=args.host, port=args.port)
    elif args.command == "suggest":
        suggestions = match_suggestions(args.title, args.start, [], UserRole(args.role))
        payload = {"suggestions": [suggestion.to_record() for suggestion in suggestions]}
        sys.stdout.write(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode() + "\n")
    else:  # pragma: no cover - argparse enforces choices
        parser.print_help()


if __name__ == "__main__":
    main()
