"""Command-line helper for Discourse user, API key and category administration.

This module serves as a CLI wrapper around discourse_admin.core services.
"""
from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from discourse_admin.config import AppConfig, load_settings
from discourse_admin.core import (
    CategoryRecord,
    DiscourseClient,
    Result,
    UserSummary,
)
from discourse_admin.core.exceptions import DiscourseError
from scripts import audit


def _format(value) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, indent=2, sort_keys=True)
    return str(value)


def _report(cmd: str, result: Result) -> int:
    """Print the result value (stdout) or failure reason (stderr); return the exit code."""
    if result.is_ok:
        print(_format(result.value))
        return 0
    print(f"[{cmd}] Error: {_format(result.error)}", file=sys.stderr)
    return 1


def _report_category(cmd: str, result: Result) -> int:
    if result.is_err:
        return _report(cmd, result)
    category = CategoryRecord.from_body(result.value)
    parent = f", parent={category.parent_category_id}" if category.parent_category_id is not None else ""
    print(f"{category.name} (id={category.id}, slug={category.slug}{parent})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Discourse admin helper")
    parser.add_argument("--endpoint", help="Discourse base URL (default: DISCOURSE_ENDPOINT)")
    parser.add_argument("--api-username", help="Admin username (default: DISCOURSE_USERNAME)")
    parser.add_argument("--api-key", help="Admin API key (default: /run/secrets/discourse_api_key or DISCOURSE_API_KEY)")
    parser.add_argument("--timeout", type=float, default=None,
                        help="Request timeout in seconds (default: DISCOURSE_REQUEST_TIMEOUT)")
    parser.add_argument("--operator", default="cli",
                        help="Operator identifier for audit logs (default: cli)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log HTTP requests")

    sub = parser.add_subparsers(dest="cmd")

    su = sub.add_parser("user-id")
    su.add_argument("username")

    sg = sub.add_parser("user")
    sg.add_argument("username")
    sg.add_argument("--summary", action="store_true", help="Print a one-line summary instead of the body")

    sc = sub.add_parser("create-user")
    sc.add_argument("--name", required=True)
    sc.add_argument("--email", required=True)
    sc.add_argument("--password", default=os.environ.get("DISCOURSE_NEW_USER_PASSWORD"))

    sd = sub.add_parser("deactivate")
    sd.add_argument("username")

    sr = sub.add_parser("reactivate")
    sr.add_argument("username")

    skg = sub.add_parser("generate-api-key")
    skg.add_argument("user_id", type=int)

    skr = sub.add_parser("revoke-api-key")
    skr.add_argument("user_id", type=int)

    st = sub.add_parser("create-topic")
    st.add_argument("--name", required=True)
    st.add_argument("--color", required=True)

    sca = sub.add_parser("create-category")
    sca.add_argument("--name", required=True)
    sca.add_argument("--color", required=True)
    sca.add_argument("--parent-category-id", type=int, default=None)
    sca.add_argument("--description", default="")
    sca.add_argument("--icon", default="")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Command-line entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.cmd:
        parser.print_help()
        return

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    client = DiscourseClient.from_settings(resolve_settings(parser, args))

    try:
        sys.exit(_dispatch(parser, args, client))
    except DiscourseError as e:
        print(f"[{args.cmd}] Error: {e}", file=sys.stderr)
        sys.exit(1)


def resolve_settings(parser: argparse.ArgumentParser, args) -> AppConfig:
    """Environment settings (load_settings) with command-line flags taking precedence."""
    config = None
    if os.environ.get("DISCOURSE_ENDPOINT") or not args.endpoint:
        try:
            config = load_settings()
        except RuntimeError as e:
            parser.error(f"{e} (or pass --endpoint)")
    if config is None:
        config = AppConfig(discourse_endpoint=args.endpoint)

    overrides = {
        "discourse_endpoint": args.endpoint,
        "discourse_username": args.api_username,
        "discourse_api_key": args.api_key,
        "request_timeout": args.timeout,
    }
    return replace(config, **{key: value for key, value in overrides.items() if value is not None})


def _dispatch(parser: argparse.ArgumentParser, args, client: DiscourseClient) -> int:
    def record(event_type, target, result: Result, details=None) -> None:
        details = dict(details or {})
        if result.is_err:
            details["error"] = _format(result.error)
        audit.safe_log_admin_event(
            event_type,
            str(target),
            operator=args.operator,
            endpoint=client.credentials.endpoint,
            details=details,
            success=result.is_ok,
        )

    if args.cmd == "user-id":
        return _report(args.cmd, client.users.user_id(args.username))

    if args.cmd == "user":
        result = client.users.user(args.username)
        if args.summary and result.is_ok and isinstance(result.value, dict):
            summary = UserSummary.from_body(result.value)
            state = "active" if summary.active else "inactive"
            print(f"{summary.username} (id={summary.id}, {state}, badges={summary.badge_count})")
            return 0
        return _report(args.cmd, result)

    if args.cmd == "create-user":
        if not args.password:
            parser.error("Missing password (--password or DISCOURSE_NEW_USER_PASSWORD)")
        result = client.users.create_user(args.name, args.email, args.password)
        record("create_user", args.name, result, {"email": args.email})
        return _report(args.cmd, result)

    if args.cmd == "deactivate":
        result = client.users.deactivate_user(args.username)
        record("deactivate_user", args.username, result, {"outcome": result.value if result.is_ok else None})
        return _report(args.cmd, result)

    if args.cmd == "reactivate":
        result = client.users.reactivate_user(args.username)
        record("reactivate_user", args.username, result, {"outcome": result.value if result.is_ok else None})
        return _report(args.cmd, result)

    if args.cmd == "generate-api-key":
        result = client.api_keys.generate_user_api_key(args.user_id)
        record("generate_api_key", args.user_id, result)
        return _report(args.cmd, result)

    if args.cmd == "revoke-api-key":
        result = client.api_keys.revoke_user_api_key(args.user_id)
        record("revoke_api_key", args.user_id, result)
        return _report(args.cmd, result)

    if args.cmd == "create-topic":
        result = client.categories.create_community_topic(args.name, args.color)
        record("create_community_topic", args.name, result, {"color": args.color})
        return _report_category(args.cmd, result)

    if args.cmd == "create-category":
        result = client.categories.create_category(
            args.name, args.color, args.parent_category_id, args.description, args.icon
        )
        record("create_category", args.name, result, {
            "color": args.color,
            "parent_category_id": args.parent_category_id,
        })
        return _report_category(args.cmd, result)

    parser.print_help()
    return 0


if __name__ == "__main__":
    main()
