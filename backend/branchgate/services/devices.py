"""Service helpers for devices mounted on access points."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from branchgate.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from branchgate.db.session import transaction
from branchgate.models.branch import AccessPoint
from branchgate.models.device import Device, DeviceDirection
from branchgate.schemas.device import DeviceCreate, DeviceUpdate

logger = logging.getLogger(__name__)

DIRECTIONS = {item.value for item in DeviceDirection}


def _require_access_point(db: Session, access_point_id: int) -> AccessPoint:
    access_point = db.get(AccessPoint, access_point_id)
    if not access_point:
        raise NotFoundError("access_point_not_found", details={"access_point_id": access_point_id})
    return access_point


def _check_direction(direction: str) -> str:
    if direction not in DIRECTIONS:
        raise InvalidInputError("invalid_direction", details={"direction": direction, "allowed": sorted(DIRECTIONS)})
    return direction


def list_for_access_point(db: Session, access_point_id: int) -> list[Device]:
    _require_access_point(db, access_point_id)
    return (
        db.query(Device)
        .filter(Device.access_point_id == access_point_id)
        .order_by(Device.direction.asc(), Device.name.asc())
        .all()
    )


def get_device(db: Session, device_id: int) -> Device:
    device = db.get(Device, device_id)
    if not device:
        raise NotFoundError("device_not_found", details={"device_id": device_id})
    return device


def create_for_access_point(db: Session, access_point_id: int, data: DeviceCreate) -> Device:
    if not data.name or not data.serial:
        raise InvalidInputError("name_and_serial_required")
    direction = _check_direction(data.direction)
    _require_access_point(db, access_point_id)

    device = Device(
        access_point_id=access_point_id,
        name=data.name,
        serial=data.serial,
        direction=direction,
        is_active=data.is_active,
    )
    try:
        with transaction(db):
            db.add(device)
    except IntegrityError as exc:
        raise ConflictError("device_conflict", details={"serial": data.serial, "direction": direction}) from exc
    db.refresh(device)
    logger.info("Device created: id=%s access_point_id=%s direction=%s", device.id, access_point_id, direction)
    return device


def update_device(db: Session, device_id: int, data: DeviceUpdate) -> Device:
    changes = data.model_dump(exclude_unset=True)
    if not changes:
        raise InvalidInputError("empty_patch")

    device = get_device(db, device_id)
    try:
        with transaction(db):
            for field in ("name", "serial"):
                if field in changes:
                    if not changes[field]:
                        raise InvalidInputError(f"{field}_required", details={"field": field})
                    setattr(device, field, changes[field])
            if "direction" in changes:
                device.direction = _check_direction(changes["direction"] or "")
            if "is_active" in changes:
                if changes["is_active"] is None:
                    raise InvalidInputError("is_active_required", details={"field": "is_active"})
                device.is_active = changes["is_active"]
    except IntegrityError as exc:
        raise ConflictError("device_conflict", details={"device_id": device_id}) from exc
    db.refresh(device)
    return device


def delete_device(db: Session, device_id: int) -> None:
    device = get_device(db, device_id)
    with transaction(db):
        db.delete(device)
    logger.info("Device deleted: id=%s", device_id)
