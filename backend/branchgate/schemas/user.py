"""Pydantic schemas for admin user management."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field, field_validator

from branchgate.core.sanitize import clean_single_line


class UserOut(BaseModel):
    id: int
    username: str
    role: str
    is_active: bool
    created_at: dt.datetime

    class Config:
        from_attributes = True


class UserRoleUpdate(BaseModel):
    role: str = Field(min_length=1, max_length=50)

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: str) -> str:
        return clean_single_line(value)


class UserActiveUpdate(BaseModel):
    is_active: bool
