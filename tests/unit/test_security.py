"""
Unit tests for password hashing and session tokens.
"""

import uuid
from datetime import timedelta

import jwt
import pytest
from starlette.requests import Request

from app.core.security import (
    SessionClaims,
    SessionTokenManager,
    hash_password,
    login_tokens,
    read_session,
    session_tokens,
    verify_password,
)
from app.exceptions.base import UnauthorizedError

SECRET = "unit-test-secret-with-enough-length-00000"


def make_claims(**overrides) -> SessionClaims:
    data = {
        "id": str(uuid.uuid4()),
        "username": "alice",
        "email": "a@x.com",
        "is_verified": True,
    }
    data.update(overrides)
    return SessionClaims(**data)


def make_request(cookies: dict[str, str] | None = None, headers: dict[str, str] | None = None):
    raw_headers = []
    if cookies:
        cookie = "; ".join(f"{k}={v}" for k, v in cookies.items())
        raw_headers.append((b"cookie", cookie.encode()))
    for k, v in (headers or {}).items():
        raw_headers.append((k.lower().encode(), v.encode()))
    scope = {"type": "http", "method": "GET", "path": "/", "headers": raw_headers, "query_string": b""}
    return Request(scope)


class TestPasswordHashing:
    """Test cases for bcrypt helpers."""

    def test_hash_is_not_plaintext_and_verifies(self):
        hashed = hash_password("secret1")

        assert hashed != "secret1"
        assert verify_password("secret1", hashed) is True

    def test_wrong_password_does_not_verify(self):
        hashed = hash_password("secret1")

        assert verify_password("secret2", hashed) is False

    def test_same_password_gets_different_salts(self):
        assert hash_password("secret1") != hash_password("secret1")

    def test_missing_hash_never_verifies(self):
        assert verify_password("secret1", None) is False
        assert verify_password("secret1", "") is False

    def test_malformed_hash_does_not_raise(self):
        assert verify_password("secret1", "not-a-bcrypt-hash") is False


class TestSessionClaims:
    """Test cases for the typed claim set."""

    def test_rejects_non_uuid_id(self):
        with pytest.raises(ValueError):
            make_claims(id="not-a-uuid")

    def test_rejects_wrong_types_without_coercion(self):
        with pytest.raises(ValueError):
            make_claims(is_verified="yes")
        with pytest.raises(ValueError):
            make_claims(username=123)

    def test_user_id_property(self):
        user_id = uuid.uuid4()
        claims = make_claims(id=str(user_id))

        assert claims.user_id == user_id


class TestSessionTokenManager:
    """Test cases for issuing and decoding tokens."""

    def test_round_trip_keeps_claims(self):
        manager = SessionTokenManager(SECRET, timedelta(days=30))
        claims = make_claims()

        decoded = manager.decode(manager.issue(claims))

        assert decoded.id == claims.id
        assert decoded.username == "alice"
        assert decoded.email == "a@x.com"
        assert decoded.is_verified is True
        assert decoded.expires is not None

    def test_expired_token_rejected(self):
        manager = SessionTokenManager(SECRET, timedelta(seconds=-5))

        with pytest.raises(UnauthorizedError):
            manager.decode(manager.issue(make_claims()))

    def test_wrong_secret_rejected(self):
        token = SessionTokenManager(SECRET, timedelta(hours=1)).issue(make_claims())
        other = SessionTokenManager("another-secret-with-enough-length-000000", timedelta(hours=1))

        with pytest.raises(UnauthorizedError):
            other.decode(token)

    def test_payload_with_wrong_claim_type_rejected(self):
        token = jwt.encode(
            {
                "sub": str(uuid.uuid4()),
                "username": "alice",
                "email": "a@x.com",
                "is_verified": "true",
                "iat": 1700000000,
                "exp": 4100000000,
            },
            SECRET,
            algorithm="HS256",
        )

        with pytest.raises(UnauthorizedError):
            SessionTokenManager(SECRET, timedelta(hours=1)).decode(token)

    def test_payload_missing_claim_rejected(self):
        token = jwt.encode(
            {"sub": str(uuid.uuid4()), "username": "alice", "iat": 1700000000, "exp": 4100000000},
            SECRET,
            algorithm="HS256",
        )

        with pytest.raises(UnauthorizedError):
            SessionTokenManager(SECRET, timedelta(hours=1)).decode(token)

    def test_configured_lifetimes(self):
        assert session_tokens.lifetime == timedelta(days=30)
        assert login_tokens.lifetime == timedelta(hours=1)


class TestReadSession:
    """Test cases for picking a session off the request."""

    def test_no_token(self):
        assert read_session(make_request()) is None

    def test_session_cookie(self):
        claims = make_claims()
        request = make_request(cookies={"session-token": session_tokens.issue(claims)})

        assert read_session(request).id == claims.id

    def test_bearer_header(self):
        claims = make_claims()
        request = make_request(headers={"Authorization": f"Bearer {session_tokens.issue(claims)}"})

        assert read_session(request).id == claims.id

    def test_standalone_login_cookie(self):
        claims = make_claims()
        request = make_request(cookies={"token": login_tokens.issue(claims)})

        assert read_session(request).id == claims.id

    def test_login_token_not_accepted_as_session_cookie(self):
        request = make_request(cookies={"session-token": login_tokens.issue(make_claims())})

        assert read_session(request) is None

    def test_garbage_cookie(self):
        assert read_session(make_request(cookies={"session-token": "garbage"})) is None
