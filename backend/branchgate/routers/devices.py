"""Device endpoints, nested under access points for listing and creation."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from branchgate.core.deps import get_current_claims, require_admin
from branchgate.db.session import get_db
from branchgate.schemas.device import DeviceCreate, DeviceOut, DeviceUpdate
from branchgate.services import devices as device_service

router = APIRouter(dependencies=[Depends(get_current_claims)])


@router.get("/access-points/{access_point_id}/devices", response_model=list[DeviceOut])
def get_devices(access_point_id: int, db: Session = Depends(get_db)) -> list[DeviceOut]:
    return [DeviceOut.model_validate(d) for d in device_service.list_for_access_point(db, access_point_id)]


@router.post(
    "/access-points/{access_point_id}/devices",
    response_model=DeviceOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_device(access_point_id: int, payload: DeviceCreate, db: Session = Depends(get_db)) -> DeviceOut:
    return DeviceOut.model_validate(device_service.create_for_access_point(db, access_point_id, payload))


@router.patch("/devices/{device_id}", response_model=DeviceOut, dependencies=[Depends(require_admin)])
def patch_device(device_id: int, payload: DeviceUpdate, db: Session = Depends(get_db)) -> DeviceOut:
    return DeviceOut.model_validate(device_service.update_device(db, device_id, payload))


@router.delete(
    "/devices/{device_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
    dependencies=[Depends(require_admin)],
)
def delete_device(device_id: int, db: Session = Depends(get_db)) -> Response:
    device_service.delete_device(db, device_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
