"""Public, read-only geographic catalog."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from branchgate.db.session import get_db
from branchgate.schemas.location import CityOut, CommuneOut, RegionOut
from branchgate.services.locations import list_cities, list_communes, list_regions

router = APIRouter()


@router.get("/regions", response_model=list[RegionOut])
def get_regions(db: Session = Depends(get_db)) -> list[RegionOut]:
    return [RegionOut.model_validate(r) for r in list_regions(db)]


@router.get("/regions/{region_id}/cities", response_model=list[CityOut])
def get_cities(region_id: int, db: Session = Depends(get_db)) -> list[CityOut]:
    return [CityOut.model_validate(c) for c in list_cities(db, region_id)]


@router.get("/cities/{city_id}/communes", response_model=list[CommuneOut])
def get_communes(city_id: int, db: Session = Depends(get_db)) -> list[CommuneOut]:
    return [CommuneOut.model_validate(c) for c in list_communes(db, city_id)]
