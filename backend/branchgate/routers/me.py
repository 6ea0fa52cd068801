"""Identity of the calling user."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from branchgate.core.deps import get_current_claims, get_current_user
from branchgate.core.tokens import AccessClaims
from branchgate.db.session import get_db
from branchgate.models.user import User
from branchgate.schemas.address import AddressOut
from branchgate.schemas.auth import MeResponse
from branchgate.services.addresses import list_for_user

router = APIRouter()


@router.get("", response_model=MeResponse)
def read_me(
    claims: AccessClaims = Depends(get_current_claims),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MeResponse:
    return MeResponse(
        id=user.id,
        username=user.username,
        role=user.role,
        is_active=user.is_active,
        issuer=claims.issuer,
        audience=list(claims.audience),
        expires=claims.expires_at,
        addresses=[AddressOut.model_validate(item) for item in list_for_user(db, user.id)],
    )
