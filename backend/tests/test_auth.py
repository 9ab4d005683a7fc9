"""Tests for Authentication"""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tasteid.config import settings
from tasteid.exceptions import UnauthorizedError
from tasteid.main import app
from tasteid.models.base import Base
from tasteid.utils.database import get_db
from tasteid.utils.auth import (
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_token_type,
    user_id_from_payload,
)

PROVIDER_HEADERS = {"X-Auth-Provider-Secret": settings.AUTH_PROVIDER_SECRET}


@pytest.fixture
def test_db():
    """Create a test database"""

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    yield

    app.dependency_overrides.clear()


@pytest.fixture
def client(test_db):
    """Create a test client"""
    return TestClient(app)


def test_create_session_provisions_user(client):
    """Test the first sign-in creates a user and returns tokens"""

    response = client.post(
        "/api/v1/auth/session",
        json={"email": "Test@Example.com", "name": "Test User", "image": "https://a.example.com/t.png"},
        headers=PROVIDER_HEADERS,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["expires_in"] == settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == 200
    user = me.json()
    assert user["email"] == "test@example.com"
    assert user["username"] == "test"
    assert user["name"] == "Test User"
    assert user["onboarding_completed"] is False


def test_create_session_is_idempotent(client):
    """Test repeated sign-ins map to the same user"""

    tokens = [
        client.post(
            "/api/v1/auth/session",
            json={"email": "test@example.com"},
            headers=PROVIDER_HEADERS,
        ).json()["access_token"]
        for _ in range(2)
    ]

    ids = [
        client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"}).json()["id"]
        for token in tokens
    ]
    assert ids[0] == ids[1]


def test_create_session_requires_provider_secret(client):
    """Test session exchange without the shared secret is rejected"""

    response = client.post("/api/v1/auth/session", json={"email": "test@example.com"})
    assert response.status_code == 401

    response = client.post(
        "/api/v1/auth/session",
        json={"email": "test@example.com"},
        headers={"X-Auth-Provider-Secret": "wrong"},
    )
    assert response.status_code == 401
    assert response.json()["code"] == "unauthorized"


def test_create_session_rejects_bad_email(client):
    """Test provider identities need a valid email"""

    response = client.post(
        "/api/v1/auth/session",
        json={"email": "not-an-email"},
        headers=PROVIDER_HEADERS,
    )

    assert response.status_code == 422


def test_refresh_token(client):
    """Test a refresh token yields a new access token"""

    tokens = client.post(
        "/api/v1/auth/session",
        json={"email": "test@example.com"},
        headers=PROVIDER_HEADERS,
    ).json()

    response = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})

    assert response.status_code == 200
    data = response.json()
    assert data["refresh_token"] == tokens["refresh_token"]
    assert client.get(
        "/api/v1/auth/me",
        headers={"Authorization": f"Bearer {data['access_token']}"},
    ).status_code == 200


def test_access_token_cannot_refresh(client):
    """Test access tokens are not accepted as refresh tokens"""

    token = create_access_token(data={"sub": 1})

    response = client.post("/api/v1/auth/refresh", json={"refresh_token": token})

    assert response.status_code == 401


def test_refresh_token_cannot_authenticate(client):
    """Test refresh tokens are not accepted as access tokens"""

    tokens = client.post(
        "/api/v1/auth/session",
        json={"email": "test@example.com"},
        headers=PROVIDER_HEADERS,
    ).json()

    response = client.get(
        "/api/v1/auth/me",
        headers={"Authorization": f"Bearer {tokens['refresh_token']}"},
    )

    assert response.status_code == 401


def test_token_for_deleted_user(client):
    """Test a valid token for a missing user is rejected"""

    token = create_access_token(data={"sub": 999})

    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_token_helpers():
    """Test token encoding and claim checks"""

    token = create_access_token(data={"sub": 42})
    payload = decode_token(token)

    assert payload["sub"] == "42"
    assert payload["type"] == "access"
    assert user_id_from_payload(payload) == 42
    verify_token_type(payload, "access")

    with pytest.raises(UnauthorizedError):
        verify_token_type(payload, "refresh")

    with pytest.raises(UnauthorizedError):
        user_id_from_payload({"sub": "abc"})

    refresh = decode_token(create_refresh_token(data={"sub": 42}))
    assert refresh["type"] == "refresh"


def test_expired_token():
    """Test expired tokens fail to decode"""

    token = create_access_token(data={"sub": 1}, expires_delta=timedelta(seconds=-1))

    with pytest.raises(UnauthorizedError):
        decode_token(token)
