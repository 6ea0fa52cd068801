from __future__ import annotations

import pytest
from pydantic import ValidationError

from branchgate.core.config import DEV_JWT_SECRET, Settings


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def test_csv_options_are_split() -> None:
    config = _settings(JWT_AUDIENCE=" web , ios,,", CORS_ORIGINS="https://a.example, https://b.example")

    assert config.jwt_audience == ["web", "ios"]
    assert config.cors_origins == ["https://a.example", "https://b.example"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"JWT_SECRET": "too-short"},
        {"JWT_AUDIENCE": " , "},
        {"JWT_ISSUER": "  "},
        {"ACCESS_TOKEN_EXPIRE_MINUTES": 0},
        {"REFRESH_TOKEN_EXPIRE_DAYS": -1},
        {"MAX_ACTIVE_SESSIONS": -1},
        {"PASSWORD_HASH_ROUNDS": 3},
        {"ENV": "staging"},
        {"CORS_ORIGINS": "*", "CORS_ALLOW_CREDENTIALS": True},
    ],
)
def test_invalid_configuration_fails_at_construction(overrides) -> None:
    with pytest.raises(ValidationError):
        _settings(**overrides)


def test_production_refuses_development_secret() -> None:
    config = _settings(ENV="production", JWT_SECRET=DEV_JWT_SECRET)

    with pytest.raises(RuntimeError, match="JWT_SECRET"):
        config.validate_runtime_security()


def test_production_with_real_secret_passes_and_summary_hides_it() -> None:
    config = _settings(ENV="Production", JWT_SECRET="a-real-production-secret-value")

    config.validate_runtime_security()
    assert config.is_production
    assert "a-real-production-secret-value" not in config.safe_summary()
