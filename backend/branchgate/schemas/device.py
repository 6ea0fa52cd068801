"""Pydantic schemas for access-point devices."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field, field_validator

from branchgate.core.sanitize import clean_optional, clean_single_line


class DeviceCreate(BaseModel):
    name: str = Field(max_length=150)
    serial: str = Field(max_length=100)
    direction: str = Field(max_length=10)
    is_active: bool = True

    @field_validator("name", "serial", mode="before")
    @classmethod
    def normalize_text(cls, value: str) -> str:
        return clean_single_line(value)

    @field_validator("direction", mode="before")
    @classmethod
    def normalize_direction(cls, value: str) -> str:
        return clean_single_line(value).lower()


class DeviceUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=150)
    serial: str | None = Field(default=None, max_length=100)
    direction: str | None = Field(default=None, max_length=10)
    is_active: bool | None = None

    @field_validator("name", "serial", mode="before")
    @classmethod
    def normalize_text(cls, value: str | None) -> str | None:
        return clean_optional(value)

    @field_validator("direction", mode="before")
    @classmethod
    def normalize_direction(cls, value: str | None) -> str | None:
        cleaned = clean_optional(value)
        return cleaned.lower() if cleaned is not None else None


class DeviceOut(BaseModel):
    id: int
    access_point_id: int
    name: str
    serial: str
    direction: str
    is_active: bool
    created_at: dt.datetime
    updated_at: dt.datetime

    class Config:
        from_attributes = True
