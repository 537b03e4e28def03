"""
Create an account (e.g. the first operator). Run from project root:
  python -m rolodex.scripts.create_account USERNAME PASSWORD [role]
Example:
  python -m rolodex.scripts.create_account alice your-secure-password op
"""
import argparse
import logging
import sys

from rolodex.core.config import get_settings
from rolodex.core.database import SessionLocal
from rolodex.core.dependencies import build_account_services
from rolodex.core.security import (
    PASSWORD_MAX_BYTES,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    password_length_ok,
)
from rolodex.schemas.account import ROLE_VALUES, AccountRole
from rolodex.schemas.result import ResultStatus

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Rolodex account.")
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=AccountRole.NORMAL.value,
        choices=sorted(ROLE_VALUES),
    )
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not password_length_ok(args.password):
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters"
            f" and at most {PASSWORD_MAX_BYTES} bytes in UTF-8.",
            file=sys.stderr,
        )
        return 1

    resolver = build_account_services(get_settings(), SessionLocal).resolver
    result = resolver.create(username, args.password, AccountRole(args.role))
    if result is ResultStatus.DUPLICATE_RESOURCE:
        print(f"Account '{username}' already exists.", file=sys.stderr)
        return 1
    if not result.ok:
        print(f"Creating account '{username}' failed: {result.message}.", file=sys.stderr)
        return 1
    print(f"Created account '{username}' with role '{args.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
