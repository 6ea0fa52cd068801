"""Addresses of the calling user."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from branchgate.core.deps import get_current_user
from branchgate.db.session import get_db
from branchgate.models.user import User
from branchgate.schemas.address import AddressCreate, AddressOut, AddressUpdate
from branchgate.services import addresses as address_service

router = APIRouter()


@router.get("", response_model=list[AddressOut])
def get_addresses(user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> list[AddressOut]:
    return [AddressOut.model_validate(a) for a in address_service.list_for_user(db, user.id)]


@router.post("", response_model=AddressOut, status_code=status.HTTP_201_CREATED)
def create_address(
    payload: AddressCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> AddressOut:
    return AddressOut.model_validate(address_service.create_for_user(db, user.id, payload))


@router.patch("/{address_id}", response_model=AddressOut)
def patch_address(
    address_id: int,
    payload: AddressUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> AddressOut:
    return AddressOut.model_validate(address_service.update_for_user(db, user.id, address_id, payload))


@router.delete("/{address_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response, response_model=None)
def delete_address(address_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> Response:
    address_service.delete_for_user(db, user.id, address_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
