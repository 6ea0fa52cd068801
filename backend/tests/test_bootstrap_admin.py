from __future__ import annotations

import importlib.util
from pathlib import Path

from branchgate.services import users as users_service
from conftest import make_user

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "bootstrap_admin.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("bootstrap_admin", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_bootstrap_creates_then_reports_existing_admin(db) -> None:
    script = _load_script()

    created = script.bootstrap_admin(db, "root", "a long admin password")
    again = script.bootstrap_admin(db, "root", "a long admin password")

    assert created["status"] == "created"
    assert again["status"] == "already_admin"
    assert users_service.verify_login(db, "root", "a long admin password").role == "admin"


def test_bootstrap_promotes_existing_user_unless_dry_run(db) -> None:
    script = _load_script()
    make_user(db, "ana")

    dry = script.bootstrap_admin(db, "ana", "ignored password", dry_run=True)
    assert dry["status"] == "dry_run"
    assert users_service.find_user_by_username(db, "ana").role == "user"

    promoted = script.bootstrap_admin(db, "ana", "ignored password")
    assert promoted["status"] == "promoted"
    assert users_service.find_user_by_username(db, "ana").role == "admin"
