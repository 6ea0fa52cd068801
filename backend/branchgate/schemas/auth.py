"""Pydantic schemas for authentication requests and token responses."""

from __future__ import annotations

import datetime as dt
import unicodedata

from pydantic import BaseModel, Field, field_validator

from branchgate.core.sanitize import clean_single_line
from branchgate.schemas.address import AddressOut

MAX_USERNAME_LEN = 150
MAX_PASSWORD_LEN = 128
MAX_REFRESH_TOKEN_LEN = 256


def _reject_control_chars(value: str) -> str:
    if any(unicodedata.category(ch) == "Cc" for ch in value):
        raise ValueError("password_contains_control_chars")
    return value


class LoginRequest(BaseModel):
    username: str = Field(max_length=MAX_USERNAME_LEN)
    password: str = Field(max_length=MAX_PASSWORD_LEN)

    @field_validator("username", mode="before")
    @classmethod
    def normalize_username(cls, value: str) -> str:
        return clean_single_line(value)


class RegisterRequest(BaseModel):
    username: str = Field(max_length=MAX_USERNAME_LEN)
    password: str = Field(max_length=MAX_PASSWORD_LEN)
    role: str | None = Field(default=None, max_length=50)

    @field_validator("username", "role", mode="before")
    @classmethod
    def normalize_text(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return clean_single_line(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _reject_control_chars(value)


class RegisterResponse(BaseModel):
    id: int
    username: str
    role: str

    class Config:
        from_attributes = True


class RefreshRequest(BaseModel):
    refresh_token: str = Field(min_length=1, max_length=MAX_REFRESH_TOKEN_LEN)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int
    expires_at: dt.datetime
    refresh_token: str
    refresh_expires_at: dt.datetime
    role: str
    username: str


class SessionOut(BaseModel):
    id: int
    created_at: dt.datetime
    expires_at: dt.datetime

    class Config:
        from_attributes = True


class SessionsResponse(BaseModel):
    count: int
    sessions: list[SessionOut]


class MeResponse(BaseModel):
    id: int
    username: str
    role: str
    is_active: bool
    issuer: str
    audience: list[str]
    expires: dt.datetime
    addresses: list[AddressOut]
