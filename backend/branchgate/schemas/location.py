"""Pydantic schemas for the geographic catalog."""

from __future__ import annotations

from pydantic import BaseModel


class RegionOut(BaseModel):
    id: int
    country_id: int
    name: str
    code: str

    class Config:
        from_attributes = True


class CityOut(BaseModel):
    id: int
    region_id: int
    name: str

    class Config:
        from_attributes = True


class CommuneOut(BaseModel):
    id: int
    city_id: int
    name: str

    class Config:
        from_attributes = True


class CityWithRegionOut(BaseModel):
    id: int
    name: str
    region: RegionOut

    class Config:
        from_attributes = True


class CommuneDetailOut(BaseModel):
    """Commune with its city and region, as embedded in addresses."""

    id: int
    name: str
    city: CityWithRegionOut

    class Config:
        from_attributes = True
