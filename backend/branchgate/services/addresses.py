"""Service helpers for addresses owned by the calling user."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session, joinedload

from branchgate.core.exceptions import InvalidInputError, NotFoundError
from branchgate.core.sanitize import blank_to_none
from branchgate.db.session import transaction
from branchgate.models.address import Address
from branchgate.models.location import City, Commune
from branchgate.schemas.address import AddressCreate, AddressUpdate
from branchgate.services.locations import commune_exists

logger = logging.getLogger(__name__)


def _with_location(query):
    return query.options(joinedload(Address.commune).joinedload(Commune.city).joinedload(City.region))


def _require_commune(db: Session, commune_id: int) -> None:
    if commune_id <= 0 or not commune_exists(db, commune_id):
        raise InvalidInputError("invalid_commune", details={"commune_id": commune_id})


def list_for_user(db: Session, user_id: int) -> list[Address]:
    return (
        _with_location(db.query(Address))
        .filter(Address.user_id == user_id)
        .order_by(Address.created_at.desc(), Address.id.desc())
        .all()
    )


def get_for_user(db: Session, user_id: int, address_id: int) -> Address:
    address = (
        _with_location(db.query(Address))
        .filter(Address.id == address_id, Address.user_id == user_id)
        .one_or_none()
    )
    if not address:
        # another user's address is reported exactly like a missing one
        raise NotFoundError("address_not_found", details={"address_id": address_id})
    return address


def create_for_user(db: Session, user_id: int, data: AddressCreate) -> Address:
    if not data.street or not data.number:
        raise InvalidInputError("street_and_number_required")
    _require_commune(db, data.commune_id)

    address = Address(
        user_id=user_id,
        commune_id=data.commune_id,
        street=data.street,
        number=data.number,
        apartment=blank_to_none(data.apartment),
    )
    with transaction(db):
        db.add(address)
    logger.info("Address created: id=%s user_id=%s", address.id, user_id)
    return get_for_user(db, user_id, address.id)


def update_for_user(db: Session, user_id: int, address_id: int, data: AddressUpdate) -> Address:
    changes = data.model_dump(exclude_unset=True)
    if not changes:
        raise InvalidInputError("empty_patch")

    address = get_for_user(db, user_id, address_id)
    with transaction(db):
        if "commune_id" in changes:
            _require_commune(db, data.commune_id or 0)
            address.commune_id = data.commune_id
        for field in ("street", "number"):
            if field in changes:
                value = changes[field]
                if not value:
                    raise InvalidInputError(f"{field}_required", details={"field": field})
                setattr(address, field, value)
        if "apartment" in changes:
            address.apartment = blank_to_none(changes["apartment"])
    return get_for_user(db, user_id, address_id)


def delete_for_user(db: Session, user_id: int, address_id: int) -> None:
    address = get_for_user(db, user_id, address_id)
    with transaction(db):
        db.delete(address)
    logger.info("Address deleted: id=%s user_id=%s", address_id, user_id)
