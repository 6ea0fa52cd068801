"""Read-only queries over the geographic catalog."""

from __future__ import annotations

from sqlalchemy.orm import Session

from branchgate.models.location import City, Commune, Region


def list_regions(db: Session) -> list[Region]:
    return db.query(Region).order_by(Region.name.asc()).all()


def list_cities(db: Session, region_id: int) -> list[City]:
    return db.query(City).filter(City.region_id == region_id).order_by(City.name.asc()).all()


def list_communes(db: Session, city_id: int) -> list[Commune]:
    return db.query(Commune).filter(Commune.city_id == city_id).order_by(Commune.name.asc()).all()


def commune_exists(db: Session, commune_id: int) -> bool:
    return db.query(Commune.id).filter(Commune.id == commune_id).first() is not None
