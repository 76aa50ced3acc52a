"""Unit tests for JWT token generation and validation, and role checks

Tests cover:
- Token creation with valid claims
- Token decoding and validation
- Token expiration handling
- Invalid token handling
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from paperbank.auth.jwt import create_access_token, decode_token
from paperbank.auth.roles import UserRole, is_privileged
from paperbank.config import Settings

TEST_SECRET = "test-secret-key-256-bits-minimum-length-required-for-security"


@pytest.fixture
def settings() -> Settings:
    return Settings(JWT_SECRET=TEST_SECRET, ACCESS_TOKEN_EXPIRE_MINUTES=30)


class TestCreateAccessToken:

    def test_token_contains_correct_claims(self, settings):
        user_id = uuid4()

        token = create_access_token(user_id=user_id, role="student", email="asha@college.test", settings=settings)

        payload = jwt.decode(token, options={"verify_signature": False})
        assert payload["sub"] == str(user_id)
        assert payload["role"] == "student"
        assert payload["email"] == "asha@college.test"
        assert "iat" in payload
        assert "exp" in payload

    def test_token_expiration_time(self, settings):
        before = datetime.now(timezone.utc)
        token = create_access_token(user_id=uuid4(), role="admin", email="m@college.test", settings=settings)

        payload = jwt.decode(token, options={"verify_signature": False})

        exp_time = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        expected_exp = before + timedelta(minutes=30)
        assert abs((exp_time - expected_exp).total_seconds()) < 5

    def test_token_uses_hs256_algorithm(self, settings):
        token = create_access_token(user_id=uuid4(), role="admin", email="m@college.test", settings=settings)
        assert jwt.get_unverified_header(token)["alg"] == "HS256"


class TestDecodeToken:

    def test_round_trip(self, settings):
        user_id = uuid4()
        token = create_access_token(user_id=user_id, role="admin", email="m@college.test", settings=settings)

        payload = decode_token(token, settings=settings)

        assert payload["sub"] == str(user_id)
        assert payload["role"] == "admin"

    def test_expired_token(self, settings):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": str(uuid4()), "iat": int((now - timedelta(hours=2)).timestamp()),
             "exp": int((now - timedelta(hours=1)).timestamp())},
            TEST_SECRET,
            algorithm="HS256",
        )

        with pytest.raises(jwt.ExpiredSignatureError, match="Token has expired"):
            decode_token(token, settings=settings)

    def test_wrong_secret(self, settings):
        token = create_access_token(
            user_id=uuid4(), role="admin", email="m@college.test",
            settings=Settings(JWT_SECRET="another-secret-another-secret-another-secret"),
        )

        with pytest.raises(jwt.InvalidTokenError, match="Invalid token"):
            decode_token(token, settings=settings)

    def test_malformed_token(self, settings):
        with pytest.raises(jwt.InvalidTokenError):
            decode_token("not.a.token", settings=settings)


class TestRoles:

    def test_role_values(self):
        assert UserRole.STUDENT.value == "student"
        assert UserRole.ADMIN.value == "admin"

    def test_is_privileged(self):
        assert is_privileged("admin") is True
        assert is_privileged("student") is False
        assert is_privileged("superuser") is False
