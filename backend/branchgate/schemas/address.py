"""Pydantic schemas for user addresses."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field, field_validator

from branchgate.core.sanitize import clean_optional, clean_single_line
from branchgate.schemas.location import CommuneDetailOut

MAX_STREET_LEN = 200
MAX_NUMBER_LEN = 30


class AddressCreate(BaseModel):
    commune_id: int
    street: str = Field(max_length=MAX_STREET_LEN)
    number: str = Field(max_length=MAX_NUMBER_LEN)
    apartment: str | None = Field(default=None, max_length=MAX_NUMBER_LEN)

    @field_validator("street", "number", mode="before")
    @classmethod
    def normalize_required(cls, value: str) -> str:
        return clean_single_line(value)

    @field_validator("apartment", mode="before")
    @classmethod
    def normalize_optional(cls, value: str | None) -> str | None:
        return clean_optional(value)


class AddressUpdate(BaseModel):
    commune_id: int | None = None
    street: str | None = Field(default=None, max_length=MAX_STREET_LEN)
    number: str | None = Field(default=None, max_length=MAX_NUMBER_LEN)
    # "" clears the apartment
    apartment: str | None = Field(default=None, max_length=MAX_NUMBER_LEN)

    @field_validator("street", "number", "apartment", mode="before")
    @classmethod
    def normalize_text(cls, value: str | None) -> str | None:
        return clean_optional(value)


class AddressOut(BaseModel):
    id: int
    street: str
    number: str
    apartment: str | None
    commune: CommuneDetailOut
    created_at: dt.datetime
    updated_at: dt.datetime

    class Config:
        from_attributes = True
