"""Admin endpoints for user management."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from branchgate.core.deps import get_session_manager, require_admin
from branchgate.db.session import get_db
from branchgate.schemas.user import UserActiveUpdate, UserOut, UserRoleUpdate
from branchgate.services.sessions import SessionManager
from branchgate.services.users import list_users, set_active, update_role

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("", response_model=list[UserOut])
def get_users(db: Session = Depends(get_db)) -> list[UserOut]:
    return [UserOut.model_validate(u) for u in list_users(db)]


@router.patch("/{user_id}/role", response_model=UserOut)
def set_role(user_id: int, payload: UserRoleUpdate, db: Session = Depends(get_db)) -> UserOut:
    return UserOut.model_validate(update_role(db, user_id, payload.role))


@router.patch("/{user_id}/active", response_model=UserOut)
def set_user_active(
    user_id: int,
    payload: UserActiveUpdate,
    db: Session = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager),
) -> UserOut:
    return UserOut.model_validate(set_active(db, user_id, payload.is_active, clock=sessions.clock))
