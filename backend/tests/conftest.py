import os

# Must be set before the app reads its settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import hash_password
from app.db.base import Base
from app.db.session import get_db, get_session_factory
from app.main import app
from app.models.user import User

ADMIN_PASSWORD = "19801605"
USER_PASSWORD = "123"


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db, name, password, is_admin=False, allowed_devices=1, is_suspended=False):
    user = User(
        name=name,
        password=hash_password(password),
        is_admin=is_admin,
        allowed_devices=allowed_devices,
        is_suspended=is_suspended,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def login(client, password, device_id=None):
    """Log in and drop the cookie so each test picks its identity via headers."""
    body = {"password": password}
    if device_id is not None:
        body["deviceId"] = device_id
    response = client.post("/api/auth/login", json=body)
    client.cookies.clear()
    return response


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def admin(db):
    return make_user(db, "Administrador", ADMIN_PASSWORD, is_admin=True, allowed_devices=3)


@pytest.fixture()
def user(db):
    return make_user(db, "Usuario Demo", USER_PASSWORD)


@pytest.fixture()
def admin_headers(client, admin):
    response = login(client, ADMIN_PASSWORD)
    assert response.status_code == 200
    return bearer(response.json()["token"])


@pytest.fixture()
def user_headers(client, user):
    response = login(client, USER_PASSWORD)
    assert response.status_code == 200
    return bearer(response.json()["token"])
