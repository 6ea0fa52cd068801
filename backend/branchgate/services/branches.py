"""Service helpers for branches, their address and access points.

A branch owns exactly one address and any number of access points, and each
access point owns its devices. Creation and deletion touch the whole tree in a
single transaction.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from branchgate.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from branchgate.core.sanitize import blank_to_none
from branchgate.db.session import transaction
from branchgate.models.branch import AccessPoint, Branch, BranchAddress
from branchgate.models.location import City, Commune
from branchgate.schemas.branch import BranchCreate, BranchUpdate
from branchgate.services.locations import commune_exists

logger = logging.getLogger(__name__)


def _address_options():
    return joinedload(Branch.address).joinedload(BranchAddress.commune).joinedload(Commune.city).joinedload(City.region)


def _require_commune(db: Session, commune_id: int | None) -> int:
    if not commune_id or commune_id <= 0 or not commune_exists(db, commune_id):
        raise InvalidInputError("invalid_commune", details={"commune_id": commune_id})
    return commune_id


def _require_text(value: str | None, field: str) -> str:
    if not value:
        raise InvalidInputError(f"{field}_required", details={"field": field})
    return value


def list_active(db: Session) -> list[Branch]:
    return (
        db.query(Branch)
        .options(_address_options())
        .filter(Branch.is_active.is_(True))
        .order_by(Branch.name.asc(), Branch.id.asc())
        .all()
    )


def get_detail(db: Session, branch_id: int) -> Branch:
    branch = (
        db.query(Branch)
        .options(_address_options(), selectinload(Branch.access_points).selectinload(AccessPoint.devices))
        .filter(Branch.id == branch_id)
        .one_or_none()
    )
    if not branch:
        raise NotFoundError("branch_not_found", details={"branch_id": branch_id})
    return branch


def create_branch(db: Session, data: BranchCreate) -> Branch:
    name = _require_text(data.name, "name")
    street = _require_text(data.address.street, "street")
    number = _require_text(data.address.number, "number")
    commune_id = _require_commune(db, data.address.commune_id)

    branch = Branch(name=name, code=blank_to_none(data.code), is_active=data.is_active)
    branch.address = BranchAddress(
        commune_id=commune_id,
        street=street,
        number=number,
        apartment=blank_to_none(data.address.apartment),
        extra=blank_to_none(data.address.extra),
    )
    branch.access_points = [AccessPoint(name=access_name, is_active=True) for access_name in data.access_points]
    try:
        with transaction(db):
            db.add(branch)
            db.flush()
            branch_id = branch.id
    except IntegrityError as exc:
        raise ConflictError("branch_conflict", details={"code": data.code}) from exc
    logger.info("Branch created: id=%s access_points=%s", branch_id, len(data.access_points))
    return get_detail(db, branch_id)


def update_branch(db: Session, branch_id: int, data: BranchUpdate) -> Branch:
    changes = data.model_dump(exclude_unset=True)
    if not changes:
        raise InvalidInputError("empty_patch")

    branch = get_detail(db, branch_id)
    try:
        with transaction(db):
            if "name" in changes:
                branch.name = _require_text(changes["name"], "name")
            if "code" in changes:
                branch.code = blank_to_none(changes["code"])
            if "is_active" in changes:
                if changes["is_active"] is None:
                    raise InvalidInputError("is_active_required", details={"field": "is_active"})
                branch.is_active = changes["is_active"]

            address_changes = changes.get("address")
            if address_changes:
                address = branch.address
                if address is None:
                    raise NotFoundError("branch_address_not_found", details={"branch_id": branch_id})
                if "commune_id" in address_changes:
                    address.commune_id = _require_commune(db, address_changes["commune_id"])
                for field in ("street", "number"):
                    if field in address_changes:
                        setattr(address, field, _require_text(address_changes[field], field))
                for field in ("apartment", "extra"):
                    if field in address_changes:
                        setattr(address, field, blank_to_none(address_changes[field]))
    except IntegrityError as exc:
        raise ConflictError("branch_conflict", details={"branch_id": branch_id}) from exc
    logger.info("Branch updated: id=%s fields=%s", branch_id, sorted(changes))
    return get_detail(db, branch_id)


def delete_branch(db: Session, branch_id: int) -> None:
    branch = get_detail(db, branch_id)
    with transaction(db):
        # ORM cascades remove the address, access points and their devices
        db.delete(branch)
    logger.info("Branch deleted: id=%s", branch_id)
