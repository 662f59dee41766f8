#!/usr/bin/env python3
"""Create (or reset) an admin panel account from the command line."""

from __future__ import annotations

import argparse
import getpass

from dotenv import load_dotenv

from app.db import SessionLocal
from app.models.user import KNOWN_PRIVILEGES, PRIVILEGE_PREFIX, SUPER_PRIVILEGE
from app.services.passwords import hash_password
from app.services.user_manager import user_manager


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a user for the admin panel.")
    parser.add_argument("username")
    parser.add_argument("--name", default="", help="Full name; defaults to the username")
    parser.add_argument("--email", default="")
    parser.add_argument("--password", default=None, help="Prompted for when omitted")
    parser.add_argument("--super", action="store_true", help="Grant the Super User privilege")
    parser.add_argument(
        "--privilege",
        action="append",
        default=[],
        choices=KNOWN_PRIVILEGES,
        help="Extra privilege to grant; may be repeated",
    )
    parser.add_argument("--reset", action="store_true", help="Update the user if it already exists")
    return parser.parse_args()


def main() -> int:
    load_dotenv()
    args = parse_args()
    password = args.password
    if password is None:
        password = getpass.getpass("Password: ")
        if password != getpass.getpass("Repeat password: "):
            print("The passwords do not match.")
            return 1
    if not password:
        print("A password is required.")
        return 1

    db = SessionLocal()
    try:
        user = user_manager.get_user_by_username(db, args.username)
        if user is not None and not args.reset:
            print(f"User already exists: {args.username} (use --reset to update it)")
            return 1
        if user is None:
            user = user_manager.get_user(db)
            user.username = args.username
        user.name = args.name or user.name or args.username
        user.email = args.email or user.email or ""
        user.password_hash = hash_password(password)
        if args.super:
            user.set_privilege(SUPER_PRIVILEGE, True)
        for key in args.privilege:
            user.set_privilege(f"{PRIVILEGE_PREFIX}{key}", True)
        user = user_manager.save_user(db, user)
        print(f"Saved user {user.username} (id {user.id})")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
