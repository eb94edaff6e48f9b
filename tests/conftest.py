import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-the-user-api-suite")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from userapi.api import app
from userapi.auth import get_db
from userapi.database import Base
from userapi.models.user import User
from userapi.security import Identity, create_access_token, hash_password


@pytest.fixture
def session_local():
    """Provide an isolated in-memory database for each test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    yield TestingSessionLocal
    engine.dispose()


@pytest.fixture
def db(session_local):
    session = session_local()
    yield session
    session.close()


@pytest.fixture
def client(session_local):
    def override_get_db():
        session = session_local()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Insert a user directly, optionally with a fixed id."""

    def _make_user(name="Alice", email="alice@example.com", password="secret123", role="user", id=None):
        user = User(id=id, name=name, email=email, password=hash_password(password), role=role)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def login_as(client):
    """Put a signed token for the given identity in the client's cookie jar."""

    def _login_as(id, role="user", email=None):
        identity = Identity(id=id, email=email or f"user{id}@example.com", role=role)
        client.cookies.set("token", create_access_token(identity))
        return identity

    return _login_as
