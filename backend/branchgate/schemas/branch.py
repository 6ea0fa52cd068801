"""Pydantic schemas for branches and their access points."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from branchgate.core.sanitize import clean_name_list, clean_optional, clean_single_line
from branchgate.schemas.device import DeviceOut
from branchgate.schemas.location import CommuneDetailOut

MAX_NAME_LEN = 150
MAX_CODE_LEN = 50
MAX_ACCESS_POINTS = 50


class BranchAddressIn(BaseModel):
    commune_id: int
    street: str = Field(max_length=200)
    number: str = Field(max_length=30)
    apartment: str | None = Field(default=None, max_length=30)
    extra: str | None = Field(default=None, max_length=200)

    @field_validator("street", "number", mode="before")
    @classmethod
    def normalize_required(cls, value: str) -> str:
        return clean_single_line(value)

    @field_validator("apartment", "extra", mode="before")
    @classmethod
    def normalize_optional(cls, value: str | None) -> str | None:
        return clean_optional(value)


class BranchCreate(BaseModel):
    name: str = Field(max_length=MAX_NAME_LEN)
    code: str | None = Field(default=None, max_length=MAX_CODE_LEN)
    is_active: bool = True
    address: BranchAddressIn
    access_points: list[str] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        return clean_single_line(value)

    @field_validator("code", mode="before")
    @classmethod
    def normalize_code(cls, value: str | None) -> str | None:
        return clean_optional(value)

    @field_validator("access_points", mode="before")
    @classmethod
    def normalize_access_points(cls, value: list[str] | None) -> list[str]:
        return clean_name_list(value, max_items=MAX_ACCESS_POINTS, item_max_length=MAX_NAME_LEN)


class BranchAddressPatch(BaseModel):
    commune_id: int | None = None
    street: str | None = Field(default=None, max_length=200)
    number: str | None = Field(default=None, max_length=30)
    apartment: str | None = Field(default=None, max_length=30)
    extra: str | None = Field(default=None, max_length=200)

    @field_validator("street", "number", "apartment", "extra", mode="before")
    @classmethod
    def normalize_text(cls, value: str | None) -> str | None:
        return clean_optional(value)


class BranchUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=MAX_NAME_LEN)
    # "" clears the code
    code: str | None = Field(default=None, max_length=MAX_CODE_LEN)
    is_active: bool | None = None
    address: BranchAddressPatch | None = None

    @field_validator("name", "code", mode="before")
    @classmethod
    def normalize_text(cls, value: str | None) -> str | None:
        return clean_optional(value)


class BranchAddressOut(BaseModel):
    id: int
    street: str
    number: str
    apartment: str | None
    extra: str | None
    commune: CommuneDetailOut

    class Config:
        from_attributes = True


class AccessPointOut(BaseModel):
    id: int
    name: str
    is_active: bool
    devices: list[DeviceOut]

    class Config:
        from_attributes = True


class BranchSummaryOut(BaseModel):
    id: int
    name: str
    code: str | None
    is_active: bool
    address: BranchAddressOut | None

    class Config:
        from_attributes = True


class BranchDetailOut(BranchSummaryOut):
    access_points: list[AccessPointOut]
