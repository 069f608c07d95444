# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from datetime import datetime, timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("PYTEST_RUNNING", "true")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-session-secret")
os.environ.setdefault("QR_JWT_KEYS", "test-qr-key-current,test-qr-key-retired")

from trayex.api.v1.dependencies import get_pass_tokens, get_session_tokens  # noqa: E402
from trayex.core.security import hash_password  # noqa: E402
from trayex.db.session import Base  # noqa: E402
from trayex.db.session import get_db as app_get_session  # noqa: E402
from trayex.db.time import utcnow  # noqa: E402
from trayex.main import app as fastapi_app  # noqa: E402
from trayex.models import StudentProfile, Stop, Timeslot, User, Zone  # noqa: E402
from trayex.services.keyring import KeyRing  # noqa: E402
from trayex.services.pass_tokens import PassTokenService  # noqa: E402
from trayex.services.session_tokens import SessionTokenService  # noqa: E402

TEST_DB_URL = "sqlite://"
TEST_SESSION_SECRET = "test-session-secret"
TEST_PASSWORD = "correct-horse-battery"

K1 = "qr-secret-one"
K2 = "qr-secret-two"


def backdated_clock(seconds: float):
    """Return a clock that runs ``seconds`` behind real time."""

    def _clock() -> datetime:
        return utcnow() - timedelta(seconds=seconds)

    return _clock


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    session.begin_nested()

    @event.listens_for(session, "after_transaction_end")
    def restart_savepoint(sess: Session, trans) -> None:  # pragma: no cover - SQLAlchemy internals
        if trans.nested and not getattr(trans._parent, "nested", False):
            session.begin_nested()

    try:
        yield session
    finally:
        event.remove(session, "after_transaction_end", restart_savepoint)
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def session_tokens() -> SessionTokenService:
    return SessionTokenService(TEST_SESSION_SECRET)


@pytest.fixture()
def key_ring() -> KeyRing:
    return KeyRing([K1])


@pytest.fixture()
def pass_service(key_ring: KeyRing) -> PassTokenService:
    return PassTokenService(key_ring)


@pytest.fixture()
def use_pass_service(app: FastAPI):
    """Install a PassTokenService for the endpoints; returns the installer."""
    def _install(service: PassTokenService) -> PassTokenService:
        app.dependency_overrides[get_pass_tokens] = lambda: service
        return service

    try:
        yield _install
    finally:
        app.dependency_overrides.pop(get_pass_tokens, None)


@pytest.fixture(autouse=True)
def override_session_tokens(app: FastAPI, session_tokens: SessionTokenService) -> Iterator[None]:
    app.dependency_overrides[get_session_tokens] = lambda: session_tokens
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_session_tokens, None)


def _make_user(db: Session, email: str, role: str = "STUDENT") -> User:
    user = User(email=email, role=role, password_hash=hash_password(TEST_PASSWORD))
    user.student = StudentProfile(full_name=email.split("@")[0].title())
    db.add(user)
    db.flush()
    db.refresh(user)
    return user


@pytest.fixture()
def test_user(db_session: Session) -> Iterator[User]:
    """Create and return a persisted student."""
    yield _make_user(db_session, "student@uni.test")


@pytest.fixture()
def other_user(db_session: Session) -> Iterator[User]:
    """Create and return a second persisted student."""
    yield _make_user(db_session, "other@uni.test")


@pytest.fixture()
def auth_headers(test_user: User, session_tokens: SessionTokenService) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    token = session_tokens.issue(test_user.id, test_user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def other_auth_headers(other_user: User, session_tokens: SessionTokenService) -> dict[str, str]:
    token = session_tokens.issue(other_user.id, other_user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def zone(db_session: Session) -> Iterator[Zone]:
    zone = Zone(name="North Campus")
    db_session.add(zone)
    db_session.flush()
    yield zone


@pytest.fixture()
def stop(db_session: Session, zone: Zone) -> Iterator[Stop]:
    stop = Stop(zone_id=zone.id, name="Library", lat=4.6, lng=-74.08)
    db_session.add(stop)
    db_session.flush()
    yield stop


@pytest.fixture()
def timeslot(db_session: Session, zone: Zone) -> Iterator[Timeslot]:
    start = utcnow() + timedelta(hours=2)
    timeslot = Timeslot(
        zone_id=zone.id,
        start_at=start,
        end_at=start + timedelta(minutes=45),
        capacity=2,
    )
    db_session.add(timeslot)
    db_session.flush()
    yield timeslot
