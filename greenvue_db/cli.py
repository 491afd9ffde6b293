from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys
from typing import Any, Sequence
import uuid

from greenvue_db.client import SupabaseClient, build_client
from greenvue_db.config import ConfigurationError
from greenvue_db.http import ApiHttpError, SupabaseError
from greenvue_db.logging_utils import configure_logging
from greenvue_db.models import Tier

EXIT_ERROR = 1
EXIT_CONFIG = 2


def json_output(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def body_output(body: bytes) -> None:
    print(body.decode("utf-8", errors="replace"))


def error_output(error: SupabaseError) -> None:
    result: dict[str, Any] = {"error": str(error)}
    if isinstance(error, ApiHttpError):
        result["status"] = error.status_code
    reason = getattr(error, "reason", None)
    if reason is not None:
        result["reason"] = reason.value
    print(json.dumps(result), file=sys.stderr)


def _load_json_arg(raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid JSON: {exc}") from exc


# =============================================================================
# Commands
# =============================================================================


def cmd_get(client: SupabaseClient, args: argparse.Namespace) -> None:
    body_output(client.get(args.table, args.query))


def cmd_post(client: SupabaseClient, args: argparse.Namespace) -> None:
    body_output(client.post(args.table, args.data))


def cmd_patch(client: SupabaseClient, args: argparse.Namespace) -> None:
    body_output(client.patch(args.table, args.id, args.data))


def cmd_delete(client: SupabaseClient, args: argparse.Namespace) -> None:
    body_output(client.delete(args.table, args.conditions))


def cmd_upload(client: SupabaseClient, args: argparse.Namespace) -> None:
    path = Path(args.file)
    name = args.name or path.name
    body_output(client.upload_image(name, args.bucket, path.read_bytes()))


def cmd_signup(client: SupabaseClient, args: argparse.Namespace) -> None:
    json_output(client.sign_up(args.email, args.password).to_dict())


def cmd_login(client: SupabaseClient, args: argparse.Namespace) -> None:
    json_output(client.login(args.email, args.password).raw)


def cmd_update_user(client: SupabaseClient, args: argparse.Namespace) -> None:
    json_output(client.update_user(args.id, args.data).to_dict())


# =============================================================================
# Parser
# =============================================================================


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="greenvue-db", description="Supabase REST/storage/auth smoke tool")
    parser.add_argument(
        "--service",
        action="store_true",
        help="Use SUPABASE_SERVICE_KEY instead of SUPABASE_ANON",
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: GREENVUE_LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command")

    get_parser = subparsers.add_parser("get", help="Read rows from a table")
    get_parser.add_argument("table")
    get_parser.add_argument("query", nargs="?", default="", help="Encoded query, e.g. select=*&id=eq.1")
    get_parser.set_defaults(func=cmd_get)

    post_parser = subparsers.add_parser("post", help="Insert a row")
    post_parser.add_argument("table")
    post_parser.add_argument("data", type=_load_json_arg, help="JSON payload")
    post_parser.set_defaults(func=cmd_post)

    patch_parser = subparsers.add_parser("patch", help="Update a row by id")
    patch_parser.add_argument("table")
    patch_parser.add_argument("id", type=uuid.UUID)
    patch_parser.add_argument("data", type=_load_json_arg, help="JSON payload")
    patch_parser.set_defaults(func=cmd_patch)

    delete_parser = subparsers.add_parser("delete", help="Delete rows matching a condition")
    delete_parser.add_argument("table")
    delete_parser.add_argument("conditions", help="Encoded filter, e.g. id=eq.<uuid>")
    delete_parser.set_defaults(func=cmd_delete)

    upload_parser = subparsers.add_parser("upload", help="Upload an image to a storage bucket")
    upload_parser.add_argument("file")
    upload_parser.add_argument("--bucket", required=True)
    upload_parser.add_argument("--name", default=None, help="Object name (default: file name)")
    upload_parser.set_defaults(func=cmd_upload)

    signup_parser = subparsers.add_parser("signup", help="Register a user")
    signup_parser.add_argument("email")
    signup_parser.add_argument("password")
    signup_parser.set_defaults(func=cmd_signup)

    login_parser = subparsers.add_parser("login", help="Password login")
    login_parser.add_argument("email")
    login_parser.add_argument("password")
    login_parser.set_defaults(func=cmd_login)

    update_parser = subparsers.add_parser("update-user", help="Update a user (service key)")
    update_parser.add_argument("id", type=uuid.UUID)
    update_parser.add_argument("data", type=_load_json_arg, help="JSON object of fields")
    update_parser.set_defaults(func=cmd_update_user)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args.log_level)
    tier = Tier.PRIVILEGED if args.service else Tier.ANONYMOUS

    try:
        client = build_client(tier)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_CONFIG

    with client:
        try:
            args.func(client, args)
        except SupabaseError as exc:
            error_output(exc)
            return EXIT_ERROR
    return 0


if __name__ == "__main__":
    sys.exit(main())
