"""Create (or promote) an admin user for Tasklane.

Usage:
    python -m tasklane.scripts.create_admin --email admin@example.com --name admin --password <password>
"""

from __future__ import annotations

import argparse
import sys

from tasklane.db.session import SessionLocal
from tasklane.services.admin_service import ensure_admin
from tasklane.services.errors import TasklaneError


def main() -> None:
    parser = argparse.ArgumentParser(description="Create or promote a Tasklane admin")
    parser.add_argument("--email", required=True, help="Email of the admin account")
    parser.add_argument("--name", default=None, help="Display name (defaults to email prefix)")
    parser.add_argument("--password", required=True, help="Password for the admin account")
    args = parser.parse_args()

    name = args.name or args.email.split("@", 1)[0]
    db = SessionLocal()
    try:
        user, created = ensure_admin(db, args.email, name, args.password)
    except TasklaneError as e:
        print(f"Error: {e.detail}")
        sys.exit(1)
    finally:
        db.close()

    if created:
        print(f"Admin '{user.email}' created successfully (id={user.id}).")
    else:
        print(f"User '{user.email}' promoted to admin and password updated (id={user.id}).")


if __name__ == "__main__":
    main()
