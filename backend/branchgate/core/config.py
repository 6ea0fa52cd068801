"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]

DEV_JWT_SECRET = "dev-secret-change-me-please"
VALID_ENVS = ("development", "lab", "production")


def split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    APP_NAME: str = "BranchGate API"
    ENV: str = "development"
    API_V1_STR: str = "/api/v1"

    DATABASE_URL: str = "postgresql+psycopg://postgres@localhost:5432/branchgate"

    JWT_SECRET: str = DEV_JWT_SECRET
    JWT_ISSUER: str = "branchgate-api"
    JWT_AUDIENCE: str = "web,ios,android"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 30
    MAX_ACTIVE_SESSIONS: int = 3
    PASSWORD_HASH_ROUNDS: int = 12

    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: str = "http://localhost:3000"
    CORS_ALLOW_CREDENTIALS: bool = True

    model_config = SettingsConfigDict(env_file=str(BASE_DIR / ".env"), env_file_encoding="utf-8", extra="ignore")

    @field_validator("ENV")
    @classmethod
    def validate_env(cls, value: str) -> str:
        env = value.strip().lower()
        if env not in VALID_ENVS:
            raise ValueError(f"ENV must be one of {', '.join(VALID_ENVS)}")
        return env

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, value: str) -> str:
        if len(value) < 16:
            raise ValueError("JWT_SECRET must be at least 16 characters")
        return value

    @field_validator("JWT_ISSUER")
    @classmethod
    def validate_issuer(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("JWT_ISSUER must not be empty")
        return value

    @field_validator("JWT_AUDIENCE")
    @classmethod
    def validate_audience(cls, value: str) -> str:
        if not split_csv(value):
            raise ValueError("JWT_AUDIENCE must list at least one audience")
        return value

    @field_validator("ACCESS_TOKEN_EXPIRE_MINUTES", "REFRESH_TOKEN_EXPIRE_DAYS")
    @classmethod
    def validate_positive_ttl(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("token lifetimes must be greater than zero")
        return value

    @field_validator("MAX_ACTIVE_SESSIONS")
    @classmethod
    def validate_max_sessions(cls, value: int) -> int:
        if value < 0:
            raise ValueError("MAX_ACTIVE_SESSIONS must not be negative")
        return value

    @field_validator("PASSWORD_HASH_ROUNDS")
    @classmethod
    def validate_hash_rounds(cls, value: int) -> int:
        if not 4 <= value <= 31:
            raise ValueError("PASSWORD_HASH_ROUNDS must be between 4 and 31")
        return value

    @model_validator(mode="after")
    def validate_cors(self) -> "Settings":
        origins = self.cors_origins
        if "*" in origins and self.CORS_ALLOW_CREDENTIALS:
            raise ValueError("CORS_ALLOW_CREDENTIALS=true is not compatible with CORS_ORIGINS='*'")
        return self

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"

    @property
    def cors_origins(self) -> list[str]:
        return split_csv(self.CORS_ORIGINS)

    @property
    def jwt_audience(self) -> list[str]:
        return split_csv(self.JWT_AUDIENCE)

    def validate_runtime_security(self) -> None:
        if not self.is_production:
            return

        errors: list[str] = []
        if self.JWT_SECRET == DEV_JWT_SECRET:
            errors.append("JWT_SECRET must be changed from the development default in production.")
        if "*" in self.cors_origins:
            errors.append("CORS_ORIGINS='*' is not allowed in production.")
        if not self.cors_origins:
            errors.append("CORS_ORIGINS must be explicitly configured in production.")

        if errors:
            raise RuntimeError("; ".join(errors))

    def safe_summary(self) -> str:
        return (
            f"ENV={self.ENV} DB=set JWT_ISSUER={self.JWT_ISSUER} JWT_AUD={self.jwt_audience} "
            f"ACCESS_TTL_MIN={self.ACCESS_TOKEN_EXPIRE_MINUTES} REFRESH_TTL_DAYS={self.REFRESH_TOKEN_EXPIRE_DAYS} "
            f"MAX_SESSIONS={self.MAX_ACTIVE_SESSIONS} CORS_ORIGINS={self.cors_origins} LOG_LEVEL={self.LOG_LEVEL}"
        )


settings = Settings()
