"""Security helpers for hashing passwords and minting refresh secrets."""

from __future__ import annotations

import hashlib
import secrets

from passlib.context import CryptContext

from branchgate.core.config import settings
from branchgate.core.exceptions import InternalError

REFRESH_TOKEN_BYTES = 32


def build_password_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


pwd_context = build_password_context(settings.PASSWORD_HASH_ROUNDS)


def hash_password(password: str) -> str:
    try:
        return pwd_context.hash(password)
    except OSError as exc:
        raise InternalError("password_hash_failed") from exc


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


def burn_password_check() -> None:
    """Spend the same bcrypt cost as a real check when no user matched."""
    pwd_context.dummy_verify()


def hash_refresh_token(plain: str) -> str:
    return hashlib.sha256(plain.encode("utf-8")).hexdigest()


def generate_refresh_token() -> tuple[str, str]:
    """Return ``(plain, digest)``; only the digest may be stored or logged."""
    try:
        plain = secrets.token_bytes(REFRESH_TOKEN_BYTES).hex()
    except OSError as exc:
        raise InternalError("entropy_unavailable") from exc
    return plain, hash_refresh_token(plain)
