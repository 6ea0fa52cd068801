"""Authentication endpoints (login, refresh, logout, sessions, register)."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from branchgate.core.config import Settings
from branchgate.core.deps import get_current_user, get_session_manager, get_settings, require_admin
from branchgate.core.exceptions import InvalidRefreshTokenError
from branchgate.db.session import get_db
from branchgate.models.user import User
from branchgate.schemas.auth import (
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    RegisterResponse,
    SessionOut,
    SessionsResponse,
    TokenResponse,
)
from branchgate.services import users as users_service
from branchgate.services.sessions import SessionManager, TokenPair

router = APIRouter()
logger = logging.getLogger(__name__)


def _token_response(pair: TokenPair, user: User, config: Settings) -> TokenResponse:
    return TokenResponse(
        access_token=pair.access_token,
        token_type="Bearer",
        expires_in=config.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        expires_at=pair.access_expires_at,
        refresh_token=pair.refresh_token,
        refresh_expires_at=pair.refresh_expires_at,
        role=user.role,
        username=user.username,
    )


@router.post("/login", response_model=TokenResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager),
    config: Settings = Depends(get_settings),
) -> TokenResponse:
    user = users_service.verify_login(db, payload.username, payload.password)
    pair = sessions.issue_for_user(db, user)
    return _token_response(pair, user, config)


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    payload: RefreshRequest,
    db: Session = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager),
    config: Settings = Depends(get_settings),
) -> TokenResponse:
    pair, user = sessions.rotate(db, payload.refresh_token)
    return _token_response(pair, user, config)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, response_class=Response, response_model=None)
def logout(
    payload: RefreshRequest,
    db: Session = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager),
) -> Response:
    try:
        sessions.revoke(db, payload.refresh_token)
    except InvalidRefreshTokenError:
        # same answer whether or not the token was live
        pass
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/logout-all", status_code=status.HTTP_204_NO_CONTENT, response_class=Response, response_model=None)
def logout_all(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager),
) -> Response:
    sessions.revoke_all_for_user(db, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/sessions", response_model=SessionsResponse)
def list_sessions(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager),
) -> SessionsResponse:
    active = sessions.list_active_sessions(db, user.id)
    return SessionsResponse(count=len(active), sessions=[SessionOut.model_validate(item) for item in active])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> RegisterResponse:
    user_id = users_service.register(db, payload.username, payload.password, payload.role)
    return RegisterResponse.model_validate(users_service.get_user(db, user_id))
