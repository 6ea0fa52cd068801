"""Service helpers for registration, credential checks and admin user management."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from branchgate.core.exceptions import (
    InactiveUserError,
    InvalidCredentialsError,
    InvalidInputError,
    NotFoundError,
    UserAlreadyExistsError,
)
from branchgate.core.sanitize import clean_single_line
from branchgate.core.security import burn_password_check, hash_password, verify_password
from branchgate.core.tokens import Clock, utcnow
from branchgate.db.session import transaction
from branchgate.models.user import User
from branchgate.services.sessions import revoke_active_tokens

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "user"
USERNAME_MAX_LENGTH = 150
ROLE_MAX_LENGTH = 50
# bcrypt only reads this many bytes of a password
PASSWORD_MAX_BYTES = 72


def _clean_username(username: str | None) -> str:
    value = clean_single_line(username)
    if not value:
        raise InvalidInputError("username_required", details={"field": "username"})
    if len(value) > USERNAME_MAX_LENGTH:
        raise InvalidInputError("username_too_long", details={"field": "username"})
    return value


def _clean_role(role: str | None) -> str:
    value = (role or "").strip() or DEFAULT_ROLE
    if len(value) > ROLE_MAX_LENGTH:
        raise InvalidInputError("role_too_long", details={"field": "role"})
    return value


def find_user_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == clean_single_line(username)).first()


def register(db: Session, username: str, password: str, role: str | None = None) -> int:
    clean_username = _clean_username(username)
    if not password:
        raise InvalidInputError("password_required", details={"field": "password"})
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise InvalidInputError("password_too_long", details={"field": "password", "max_bytes": PASSWORD_MAX_BYTES})

    user = User(
        username=clean_username,
        password_hash=hash_password(password),
        role=_clean_role(role),
        is_active=True,
    )
    try:
        with transaction(db):
            db.add(user)
            db.flush()
    except IntegrityError as exc:
        logger.warning("Registration failed: username taken (%s)", clean_username)
        raise UserAlreadyExistsError(clean_username) from exc
    logger.info("User created: %s (role=%s)", user.username, user.role)
    return user.id


def verify_login(db: Session, username: str, password: str) -> User:
    password = password or ""
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        # registration refuses these, so none can match
        burn_password_check()
        logger.warning("Login failed: password over %s bytes (%s)", PASSWORD_MAX_BYTES, clean_single_line(username))
        raise InvalidCredentialsError()
    user = find_user_by_username(db, username or "")
    if not user:
        burn_password_check()
        logger.warning("Login failed: user not found (%s)", clean_single_line(username))
        raise InvalidCredentialsError()
    if not verify_password(password, user.password_hash):
        logger.warning("Login failed: invalid password (%s)", user.username)
        raise InvalidCredentialsError()
    if not user.is_active:
        logger.warning("Login failed: inactive user (%s)", user.username)
        raise InactiveUserError()
    logger.info("User authenticated: %s", user.username)
    return user


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("user_not_found", details={"user_id": user_id})
    return user


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


def update_role(db: Session, user_id: int, role: str) -> User:
    user = get_user(db, user_id)
    with transaction(db):
        user.role = _clean_role(role)
    db.refresh(user)
    logger.info("User role updated: %s -> %s", user.username, user.role)
    return user


def set_active(db: Session, user_id: int, is_active: bool, *, clock: Clock = utcnow) -> User:
    """Enable or disable a user; disabling also revokes every active session."""
    user = get_user(db, user_id)
    revoked = 0
    with transaction(db):
        user.is_active = is_active
        # writes the user row first so it is locked before any refresh row
        db.flush()
        if not is_active:
            revoked = revoke_active_tokens(db, user.id, clock())
    db.refresh(user)
    logger.info("User %s: %s (sessions revoked=%s)", "enabled" if is_active else "disabled", user.username, revoked)
    return user
