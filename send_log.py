#!/usr/bin/env python3
"""Send one log entry to the James OS dashboard.

Usage:
    python send_log.py <level> <category> <message> [details...]

Levels: info, working, success, warn, error, llm-request, llm-response, tool-call, file-op
Categories: system, task, file, command, api, build, llm, user-request, tool, response

Delivery is best effort: if the dashboard is not running, nothing is sent
and the command still exits 0.
"""

import argparse
import sys

from src.models.log_entry import LogCategory, LogLevel
from src.services.log_sender import LogSender


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        description="Send a log entry to the James OS dashboard",
        epilog=(
            f"Levels: {', '.join(lv.value for lv in LogLevel)}. "
            f"Categories: {', '.join(c.value for c in LogCategory)}."
        ),
    )
    parser.add_argument("level", help="Entry level")
    parser.add_argument("category", help="Entry category")
    parser.add_argument("message", help="Entry message")
    parser.add_argument("details", nargs="*", help="Optional details (joined with spaces)")
    parser.add_argument("--host", help="Dashboard host (default: $HOST or localhost)")
    parser.add_argument("--port", type=int, help="Dashboard port (default: $PORT or 5050)")
    parser.add_argument("--session", "-s", dest="session_id", help="Session ID to log under")
    parser.add_argument("--parent", "-p", dest="parent_id", help="Parent log ID")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI."""
    args = build_parser().parse_args(argv)
    details = " ".join(args.details) or None

    sender = LogSender(host=args.host, port=args.port)
    result = sender.send(
        args.level,
        args.category,
        args.message,
        details,
        sessionId=args.session_id,
        parentId=args.parent_id,
    )

    if result.sent:
        print(f"✓ Log sent: {args.message}")
    elif result.status_code is not None:
        print(f"✗ Failed to send log: {result.status_code}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
