"""Tests for bearer session resolution."""

from datetime import timedelta

from fastapi import status
from jose import jwt

from tests.conftest import TEST_SESSION_SECRET, backdated_clock
from trayex.services.session_tokens import SessionTokenService


class TestSessionAuth:
    def test_missing_token(self, client):
        response = client.get("/api/v1/auth/me")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Missing token"
        assert response.headers["www-authenticate"] == "Bearer"

    def test_not_a_bearer_scheme(self, client):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Basic abc"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_malformed_token(self, client):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not.a.jwt"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Invalid token"

    def test_expired_token(self, client, test_user):
        old = SessionTokenService(TEST_SESSION_SECRET, clock=backdated_clock(600))
        token = old.issue(test_user.id, test_user.role, ttl=timedelta(seconds=60))
        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_wrong_secret(self, client, test_user):
        token = jwt.encode(
            {"sub": test_user.id, "role": "STUDENT", "exp": 2**31},
            "wrong_secret_key",
            algorithm="HS256",
        )
        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_pass_token_cannot_authenticate(self, client, pass_service, test_user):
        token = pass_service.mint(test_user.id, role=test_user.role)
        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_deleted_user(self, client, session_tokens):
        token = session_tokens.issue("no-such-user", "STUDENT")
        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
