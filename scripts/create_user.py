#!/usr/bin/env python3
"""
Create a user account directly in the database.

Registration over HTTP always yields role ``user``; this is how the first
administrator gets provisioned.

    python scripts/create_user.py admin@example.com Ada Lovelace --role admin
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.core.logging import setup_logging  # noqa: E402
from src.domain.errors import ConflictError, ValidationFailedError  # noqa: E402
from src.domain.services.auth_service import AuthService  # noqa: E402
from src.infrastructure.db.models import UserRole  # noqa: E402
from src.infrastructure.db.session import dispose_engine, get_session_factory  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create an error monitor user")
    parser.add_argument("email", help="Unique email address for login")
    parser.add_argument("first_name", help="Given name")
    parser.add_argument("last_name", help="Family name")
    parser.add_argument(
        "--role",
        choices=[role.value for role in UserRole],
        default=UserRole.USER.value,
        help="Role to grant (default: user)",
    )
    return parser.parse_args()


def prompt_for_password() -> str:
    for _ in range(3):
        password = getpass.getpass("Password: ")
        confirm = getpass.getpass("Confirm password: ")
        if password != confirm:
            print("Passwords do not match. Try again.", file=sys.stderr)
            continue
        return password
    raise SystemExit("Failed to set password after three attempts.")


async def create_user(args: argparse.Namespace, password: str) -> int:
    session_factory = get_session_factory()
    try:
        async with session_factory() as session:
            result = await AuthService(session).register_user(
                email=args.email,
                password=password,
                first_name=args.first_name,
                last_name=args.last_name,
                role=UserRole(args.role),
            )
    except (ConflictError, ValidationFailedError) as exc:
        details = getattr(exc, "details", None) or {}
        print(f"Error: {exc}", file=sys.stderr)
        for field, message in details.items():
            print(f"  {field}: {message}", file=sys.stderr)
        return 1
    finally:
        await dispose_engine()

    user = result["user"]
    print(f"Created {user['role']} {user['first_name']} {user['last_name']} <{user['email']}>")
    print(f"Bearer token: {result['token']}")
    return 0


def main() -> int:
    setup_logging("WARNING")
    args = parse_args()
    password = prompt_for_password()
    return asyncio.run(create_user(args, password))


if __name__ == "__main__":
    raise SystemExit(main())
