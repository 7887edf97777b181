"""
Create a user directly (e.g. the first admin). Run from project root:
  python -m workhub.scripts.create_user EMAIL USERNAME PASSWORD [role] [--active]
Example:
  python -m workhub.scripts.create_user admin@example.com admin your-secure-password ADMIN --active
"""
import argparse
import sys

from workhub.core.database import SessionLocal
from workhub.core.errors import ConflictError
from workhub.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN, hash_password
from workhub.models import UserRole
from workhub.services.credential_store import CredentialStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Workhub user without email verification.")
    parser.add_argument("email", help="Email address (unique)")
    parser.add_argument("username", help="Display name (1-255 chars)")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=UserRole.USER.value,
        choices=[r.value for r in UserRole],
    )
    parser.add_argument(
        "--active",
        action="store_true",
        help="Mark the account as already verified",
    )
    args = parser.parse_args(argv)

    email = args.email.strip()
    username = args.username.strip()
    if not email or "@" not in email:
        print("Invalid email address.", file=sys.stderr)
        return 1
    if not username or len(username) > 255:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if len(args.password) < PASSWORD_MIN_LEN or len(args.password) > PASSWORD_MAX_LEN:
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    db = SessionLocal()
    try:
        CredentialStore(db).create(
            email=email,
            username=username,
            password_hash=hash_password(args.password),
            role=UserRole(args.role),
            is_active=args.active,
        )
    except ConflictError:
        print(f"User '{email}' already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{email}' with role '{args.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
