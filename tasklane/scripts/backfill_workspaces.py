"""Create an owned workspace for every user that has none.

Usage:
    python -m tasklane.scripts.backfill_workspaces
"""

from __future__ import annotations

import logging

from tasklane.db.session import SessionLocal
from tasklane.services.workspace_service import backfill_owned_workspaces


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    db = SessionLocal()
    try:
        changed = backfill_owned_workspaces(db)
    finally:
        db.close()
    print(f"Backfilled workspaces for {changed} user(s).")


if __name__ == "__main__":
    main()
