"""Common FastAPI dependencies for authentication and authorization.

Verified access-token claims travel as an explicit ``AccessClaims`` value from
``get_current_claims``; handlers that need them declare the dependency.
"""

from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from branchgate.core.config import Settings, settings
from branchgate.core.exceptions import InsufficientPermissionsError, InvalidTokenError, NotAuthenticatedError
from branchgate.core.tokens import AccessClaims, AccessTokenCodec
from branchgate.db.session import get_db
from branchgate.models.user import User
from branchgate.services.sessions import SessionManager

ADMIN_ROLE = "admin"

_session_manager = SessionManager(settings)


def get_settings() -> Settings:
    return settings


def get_session_manager() -> SessionManager:
    return _session_manager


def get_token_codec(sessions: SessionManager = Depends(get_session_manager)) -> AccessTokenCodec:
    return sessions.codec


def _extract_bearer_token(request: Request) -> str | None:
    authorization = request.headers.get("Authorization", "")
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    cleaned = token.strip()
    return cleaned or None


def get_current_claims(request: Request, codec: AccessTokenCodec = Depends(get_token_codec)) -> AccessClaims:
    token = _extract_bearer_token(request)
    if not token:
        raise NotAuthenticatedError()
    return codec.verify(token)


def get_current_user(
    claims: AccessClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
) -> User:
    try:
        user_id = claims.user_id
    except ValueError:
        raise InvalidTokenError() from None
    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise InvalidTokenError()
    return user


def require_role(required: str):
    def _checker(
        claims: AccessClaims = Depends(get_current_claims),
        _user: User = Depends(get_current_user),
    ) -> AccessClaims:
        if claims.role != required:
            raise InsufficientPermissionsError("forbidden")
        return claims

    return _checker


require_admin = require_role(ADMIN_ROLE)
