"""Create an admin account, or reset its password if it exists.

Usage:
  python -m tipsheet.scripts.create_admin admin@example.com
  ADMIN_PASSWORD=... python -m tipsheet.scripts.create_admin admin@example.com

Env:
  - DATABASE_URL (whatever tipsheet.core.db uses)
  - ADMIN_PASSWORD (optional; prompted for when unset)
"""

from __future__ import annotations

import argparse
import getpass
import os

from sqlalchemy import select

from tipsheet.auth.passwords import hash_password
from tipsheet.core.db import SessionLocal
from tipsheet.models import AdminUser


def create_admin(email: str, password: str, *, deactivate: bool = False) -> str:
    email = email.strip().lower()
    with SessionLocal() as db:
        admin = db.scalars(select(AdminUser).where(AdminUser.email == email)).one_or_none()
        if admin is None:
            admin = AdminUser(email=email, password_hash=hash_password(password), is_active=not deactivate)
            db.add(admin)
            action = "created"
        else:
            admin.password_hash = hash_password(password)
            admin.is_active = not deactivate
            action = "updated"
        db.commit()
        print(f"Admin {action}: email={email} id={admin.id} active={admin.is_active}")
        return admin.id


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("email")
    parser.add_argument("--deactivate", action="store_true", help="keep the account but block sign-in")
    args = parser.parse_args(argv)

    password = os.getenv("ADMIN_PASSWORD") or getpass.getpass("Password: ")
    if not password:
        parser.error("password is empty")
    create_admin(args.email, password, deactivate=args.deactivate)


if __name__ == "__main__":
    main()
