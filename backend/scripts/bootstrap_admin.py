#!/usr/bin/env python3
"""Create the first admin account, or promote an existing user to admin.

Registration is admin-only, so the first admin has to come from here.

Usage:
    ADMIN_USERNAME=root ADMIN_PASSWORD='...' python scripts/bootstrap_admin.py
    python scripts/bootstrap_admin.py --username root --password '...' [--dry-run]
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy.orm import Session  # noqa: E402

from branchgate.core.deps import ADMIN_ROLE  # noqa: E402
from branchgate.core.exceptions import BranchGateException  # noqa: E402
from branchgate.core.logging import setup_logging  # noqa: E402
from branchgate.db.session import SessionLocal  # noqa: E402
from branchgate.services import users as users_service  # noqa: E402

logger = logging.getLogger("bootstrap_admin")

MIN_PASSWORD_LEN = 12


def bootstrap_admin(db: Session, username: str, password: str, *, dry_run: bool = False) -> dict:
    existing = users_service.find_user_by_username(db, username)
    if existing:
        if existing.role == ADMIN_ROLE:
            logger.info("User %s already is an admin (id=%s)", existing.username, existing.id)
            return {"user_id": existing.id, "username": existing.username, "status": "already_admin"}
        if dry_run:
            return {"user_id": existing.id, "username": existing.username, "status": "dry_run"}
        users_service.update_role(db, existing.id, ADMIN_ROLE)
        logger.info("Promoted %s to admin (id=%s)", existing.username, existing.id)
        return {"user_id": existing.id, "username": existing.username, "status": "promoted"}

    if dry_run:
        return {"user_id": None, "username": username, "status": "dry_run"}
    user_id = users_service.register(db, username, password, ADMIN_ROLE)
    logger.info("Created admin %s (id=%s)", username, user_id)
    return {"user_id": user_id, "username": username, "status": "created"}


def main() -> int:
    parser = argparse.ArgumentParser(description="Bootstrap an admin user for BranchGate")
    parser.add_argument("--username", default=os.environ.get("ADMIN_USERNAME"))
    parser.add_argument("--password", default=os.environ.get("ADMIN_PASSWORD"))
    parser.add_argument("--dry-run", action="store_true", help="Show what would be done without writing")
    args = parser.parse_args()

    setup_logging()
    if not args.username:
        logger.error("--username or ADMIN_USERNAME is required")
        return 1
    if not args.password or len(args.password) < MIN_PASSWORD_LEN:
        logger.error("--password or ADMIN_PASSWORD must be at least %s characters", MIN_PASSWORD_LEN)
        return 1

    db = SessionLocal()
    try:
        result = bootstrap_admin(db, args.username, args.password, dry_run=args.dry_run)
    except BranchGateException as exc:
        logger.error("Bootstrap failed: %s", exc.message)
        return 1
    finally:
        db.close()
    logger.info("Result: %s", result["status"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
