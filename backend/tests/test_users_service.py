from __future__ import annotations

import pytest

from branchgate.core.exceptions import (
    InactiveUserError,
    InvalidCredentialsError,
    InvalidInputError,
    NotFoundError,
    UserAlreadyExistsError,
)
from branchgate.models.user import User
from branchgate.services import users as users_service
from conftest import DEFAULT_PASSWORD, make_user


def test_register_trims_username_and_defaults_role(db) -> None:
    user_id = users_service.register(db, "  ana  ", DEFAULT_PASSWORD)

    user = db.get(User, user_id)
    assert user.username == "ana"
    assert user.role == "user"
    assert user.is_active is True
    assert user.password_hash != DEFAULT_PASSWORD


@pytest.mark.parametrize("username,password", [("", "pw"), ("   ", "pw"), ("ana", "")])
def test_register_rejects_blank_fields(db, username, password) -> None:
    with pytest.raises(InvalidInputError):
        users_service.register(db, username, password)


def test_register_duplicate_username_conflicts(db) -> None:
    make_user(db, "ana")

    with pytest.raises(UserAlreadyExistsError) as excinfo:
        users_service.register(db, "ana", "other-password")
    assert excinfo.value.status_code == 409
    # session stays usable after the failed insert
    assert users_service.find_user_by_username(db, "ana") is not None


def test_wrong_password_and_unknown_user_fail_identically(db) -> None:
    make_user(db, "ana")

    with pytest.raises(InvalidCredentialsError) as wrong:
        users_service.verify_login(db, "ana", "nope")
    with pytest.raises(InvalidCredentialsError) as unknown:
        users_service.verify_login(db, "ghost", "nope")

    assert type(wrong.value) is type(unknown.value)
    assert wrong.value.to_dict() == unknown.value.to_dict()


def test_inactive_user_is_distinct_internally_but_not_externally(db) -> None:
    user = make_user(db, "ana")
    users_service.set_active(db, user.id, False)

    with pytest.raises(InactiveUserError) as inactive:
        users_service.verify_login(db, "ana", DEFAULT_PASSWORD)
    with pytest.raises(InvalidCredentialsError) as wrong:
        users_service.verify_login(db, "ana", "nope")

    assert not isinstance(wrong.value, InactiveUserError)
    assert inactive.value.to_dict() == wrong.value.to_dict()


def test_verify_login_returns_user(db) -> None:
    make_user(db, "ana", role="admin")

    user = users_service.verify_login(db, " ana ", DEFAULT_PASSWORD)

    assert user.username == "ana"
    assert user.role == "admin"


def test_role_update_and_missing_user(db) -> None:
    user = make_user(db, "ana")

    assert users_service.update_role(db, user.id, "admin").role == "admin"
    with pytest.raises(NotFoundError):
        users_service.update_role(db, 9999, "admin")


def test_list_users_newest_first(db) -> None:
    make_user(db, "ana")
    make_user(db, "bob")

    assert [u.username for u in users_service.list_users(db)] == ["bob", "ana"]


def test_register_rejects_password_longer_than_bcrypt_reads(db) -> None:
    with pytest.raises(InvalidInputError) as exc:
        users_service.register(db, "bob", "x" * 73)
    assert exc.value.message == "password_too_long"
    assert db.query(User).count() == 0

    # multi-byte characters count by their encoded size
    with pytest.raises(InvalidInputError):
        users_service.register(db, "bob", "é" * 37)


def test_password_at_the_byte_limit_registers_and_longer_variants_do_not_match(db) -> None:
    users_service.register(db, "bob", "x" * 72)

    assert users_service.verify_login(db, "bob", "x" * 72).username == "bob"
    with pytest.raises(InvalidCredentialsError):
        users_service.verify_login(db, "bob", "x" * 72 + "ZZZZ")


def test_username_inner_whitespace_is_collapsed_on_register_and_login(db) -> None:
    user_id = users_service.register(db, "  ana   maria ", DEFAULT_PASSWORD)

    assert db.get(User, user_id).username == "ana maria"
    assert users_service.verify_login(db, "ana  maria", DEFAULT_PASSWORD).id == user_id
    with pytest.raises(UserAlreadyExistsError):
        users_service.register(db, "ana maria", DEFAULT_PASSWORD)
