from __future__ import annotations

import datetime as dt
import os
import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

os.environ["ENV"] = "development"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-with-enough-length"
os.environ["JWT_ISSUER"] = "branchgate-api"
os.environ["JWT_AUDIENCE"] = "web,ios,android"
os.environ["MAX_ACTIVE_SESSIONS"] = "3"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["CORS_ORIGINS"] = "http://localhost:3000"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from branchgate.core.config import Settings  # noqa: E402
from branchgate.core.deps import get_session_manager  # noqa: E402
from branchgate.db.base import Base  # noqa: E402
from branchgate.db.session import get_db  # noqa: E402
from branchgate.models import City, Commune, Region  # noqa: E402
from branchgate.services import users as users_service  # noqa: E402
from branchgate.services.sessions import SessionManager  # noqa: E402

DEFAULT_PASSWORD = "correct horse battery"


class FrozenClock:
    def __init__(self, now: dt.datetime) -> None:
        self.now = now

    def __call__(self) -> dt.datetime:
        return self.now

    def advance(self, **kwargs: float) -> dt.datetime:
        self.now = self.now + dt.timedelta(**kwargs)
        return self.now


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:  # noqa: ANN001
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db(session_factory) -> Session:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(dt.datetime(2026, 1, 1, 12, 0, 0, tzinfo=dt.timezone.utc))


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture()
def sessions(test_settings: Settings, clock: FrozenClock) -> SessionManager:
    return SessionManager(test_settings, clock=clock)


@pytest.fixture()
def client(session_factory, sessions: SessionManager):
    from branchgate.main import create_app

    app = create_app()

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_session_manager] = lambda: sessions
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(db: Session, username: str, *, role: str = "user", password: str = DEFAULT_PASSWORD):
    user_id = users_service.register(db, username, password, role)
    return users_service.get_user(db, user_id)


def login(client: TestClient, username: str, password: str = DEFAULT_PASSWORD) -> dict:
    response = client.post("/api/v1/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


def bearer(tokens: dict) -> dict[str, str]:
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest.fixture()
def catalog(db: Session) -> dict[str, int]:
    region = Region(country_id=1, name="Metropolitana", code="RM")
    db.add(region)
    db.flush()
    city = City(region_id=region.id, name="Santiago")
    db.add(city)
    db.flush()
    providencia = Commune(city_id=city.id, name="Providencia")
    nunoa = Commune(city_id=city.id, name="Nunoa")
    db.add_all([providencia, nunoa])
    db.commit()
    return {"region": region.id, "city": city.id, "commune": providencia.id, "other_commune": nunoa.id}
