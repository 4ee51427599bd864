# ruff: noqa: T201

"""
CLI module for erpauth.

Inspect the effective password policy, check the expiry state of a
password changed on a given date, and generate JWT secrets.
"""

import argparse
import secrets
import sys
from datetime import date, datetime, timezone
from importlib.metadata import PackageNotFoundError, version

from erpauth.config import get_settings
from erpauth.exceptions.errors import PolicyMisconfigurationError
from erpauth.models.auth import AuthenticatedUser
from erpauth.services.assembler import evaluate_password_status
from erpauth.services.policy import PasswordPolicy
from erpauth.utils.logging_config import init_console_logging, logging

# get erpauth_version dynamically
try:
    erpauth_version = version("erpauth")
except PackageNotFoundError:
    erpauth_version = "unknown"


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD") from e


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(prog="erpauth", description="ERP authentication tools")
    parser.add_argument("--version", action="version", version=f"erpauth v{erpauth_version}")
    parser.add_argument(
        "-log",
        "--log-level",
        default=None,
        help="Set log level (e.g., debug, info, warning, error)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("policy", help="Show the effective password policy")

    status_parser = subparsers.add_parser("status", help="Show password expiry status")
    status_parser.add_argument(
        "--changed-at",
        type=_parse_date,
        required=True,
        help="Date the password was last changed (YYYY-MM-DD)",
    )
    status_parser.add_argument(
        "--today",
        type=_parse_date,
        default=None,
        help="Evaluate as of this date (default: today, UTC)",
    )
    status_parser.add_argument(
        "--exempt",
        action="store_true",
        help="Treat the account as exempt from password expiry",
    )

    secret_parser = subparsers.add_parser("generate-secret", help="Generate a JWT secret")
    secret_parser.add_argument(
        "--length",
        type=int,
        default=32,
        help="Secret length in bytes (default: 32)",
    )

    return parser


def run_cli(argv: list[str] | None = None) -> None:
    """Run the command-line interface."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    log_level = (args.log_level or settings.LOG_LEVEL).upper()
    if not isinstance(getattr(logging, log_level, None), int):
        print(f"Invalid log level: {log_level}")
        sys.exit(1)
    init_console_logging(log_level)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "generate-secret":
        print(secrets.token_urlsafe(args.length))
        sys.exit(0)

    try:
        policy = PasswordPolicy.from_settings(settings)
    except PolicyMisconfigurationError as error:
        print(error)
        sys.exit(1)

    if args.command == "policy":
        print(policy.to_response().model_dump_json(by_alias=True, indent=2))

    elif args.command == "status":
        today = args.today or datetime.now(timezone.utc).date()
        user = AuthenticatedUser(
            id=0,
            username="cli",
            name="cli",
            role="CLI",
            role_name="CLI",
            password_changed_at=datetime.combine(args.changed_at, datetime.min.time()),
            password_policy_exempt=args.exempt,
        )
        status = evaluate_password_status(user, policy, today)
        print(status.model_dump_json(by_alias=True, indent=2))

    sys.exit(0)


if __name__ == "__main__":
    run_cli()
