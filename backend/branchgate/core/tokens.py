"""Stateless signer/verifier for short-lived bearer access tokens.

Access tokens are HS256-signed JWTs carrying the user id, username, role,
issuer, audience list, issue time and expiry. There is no server-side record of
them, so an issued token stays valid until it expires; revocation that must take
effect immediately belongs to the refresh-token layer.

Verification rejects, in order: any algorithm other than HS256 (including
``none``), a bad signature, expiry (zero leeway, a token is valid only while
``now < exp``), a foreign issuer, and an audience list that shares nothing with
the configured audiences. Every failure surfaces as the same ``InvalidTokenError``.
"""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from jose import JWTError, jwt

from branchgate.core.config import Settings, settings as default_settings
from branchgate.core.exceptions import InternalError, InvalidTokenError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

Clock = Callable[[], dt.datetime]


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class TokenSubject(Protocol):
    id: int
    username: str
    role: str


@dataclass(frozen=True)
class AccessClaims:
    subject: str
    username: str
    role: str
    issuer: str
    audience: tuple[str, ...]
    issued_at: dt.datetime
    expires_at: dt.datetime

    @property
    def user_id(self) -> int:
        return int(self.subject)


def _reject(reason: str) -> InvalidTokenError:
    logger.debug("Access token rejected: %s", reason)
    return InvalidTokenError()


def _audience_matches(token_audience: list[str], allowed: list[str]) -> bool:
    if not token_audience or not allowed:
        return False
    return bool(set(token_audience) & set(allowed))


class AccessTokenCodec:
    def __init__(self, config: Settings | None = None, *, clock: Clock = utcnow) -> None:
        self._settings = config or default_settings
        self._clock = clock

    def issue(self, user: TokenSubject, ttl: dt.timedelta | None = None) -> tuple[str, dt.datetime]:
        lifetime = ttl if ttl is not None else dt.timedelta(minutes=self._settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        # JWT NumericDate has second precision; the returned expiry matches the signed claim.
        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + lifetime
        claims: dict[str, Any] = {
            "sub": str(user.id),
            "username": user.username,
            "role": user.role,
            "iss": self._settings.JWT_ISSUER,
            "aud": self._settings.jwt_audience,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        try:
            token = jwt.encode(claims, self._settings.JWT_SECRET, algorithm=ALGORITHM)
        except JWTError as exc:
            raise InternalError("token_signing_failed") from exc
        return token, expires_at

    def verify(self, token: str) -> AccessClaims:
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as exc:
            raise _reject("malformed header") from exc
        if header.get("alg") != ALGORITHM:
            raise _reject("unexpected algorithm")

        try:
            payload = jwt.decode(
                token,
                self._settings.JWT_SECRET,
                algorithms=[ALGORITHM],
                options={"verify_exp": False, "verify_aud": False, "verify_iss": False},
            )
        except JWTError as exc:
            raise _reject("bad signature or payload") from exc

        exp = payload.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise _reject("missing exp")
        if self._clock().timestamp() >= exp:
            raise _reject("expired")

        if payload.get("iss") != self._settings.JWT_ISSUER:
            raise _reject("issuer mismatch")

        audience = payload.get("aud")
        if isinstance(audience, str):
            audience = [audience]
        if not isinstance(audience, list) or any(not isinstance(item, str) for item in audience):
            raise _reject("malformed audience")
        if not _audience_matches(audience, self._settings.jwt_audience):
            raise _reject("audience mismatch")

        subject = payload.get("sub")
        username = payload.get("username")
        role = payload.get("role")
        iat = payload.get("iat")
        if not isinstance(subject, str) or not subject:
            raise _reject("missing subject")
        if not isinstance(username, str) or not isinstance(role, str):
            raise _reject("missing identity claims")
        if isinstance(iat, bool) or not isinstance(iat, (int, float)):
            raise _reject("missing iat")

        return AccessClaims(
            subject=subject,
            username=username,
            role=role,
            issuer=payload["iss"],
            audience=tuple(audience),
            issued_at=dt.datetime.fromtimestamp(iat, tz=dt.timezone.utc),
            expires_at=dt.datetime.fromtimestamp(exp, tz=dt.timezone.utc),
        )
