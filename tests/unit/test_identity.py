"""Unit tests for access codes and JWT handling."""

import uuid
from datetime import timedelta

import pytest

from unitportal.kernel.identity.access_codes import (
    ACCESS_CODE_ALPHABET,
    generate_access_code,
    normalize_access_code,
)
from unitportal.kernel.identity.jwt import JWTManager


class TestAccessCodes:
    """Tests for access code generation."""

    def test_generated_code_uses_unambiguous_alphabet(self):
        code = generate_access_code(12)
        assert len(code) == 12
        assert all(c in ACCESS_CODE_ALPHABET for c in code)
        assert not set("0O1I") & set(code)

    def test_codes_differ(self):
        codes = {generate_access_code() for _ in range(50)}
        assert len(codes) == 50

    def test_short_codes_rejected(self):
        with pytest.raises(ValueError):
            generate_access_code(4)

    def test_normalize(self):
        assert normalize_access_code("  admin001 ") == "ADMIN001"


class TestJWTManager:
    """Tests for token issue and verification."""

    def test_round_trip(self, jwt_manager: JWTManager):
        personnel_id = uuid.uuid4()
        token, _, jti = jwt_manager.create_access_token(personnel_id, "Командир", "admin")

        payload = jwt_manager.verify_access_token(token)
        assert payload is not None
        assert payload.sub == str(personnel_id)
        assert payload.nickname == "Командир"
        assert payload.role == "admin"
        assert payload.jti == jti

    def test_issue_reports_lifetime(self, jwt_manager: JWTManager):
        issued = jwt_manager.issue(uuid.uuid4(), "Боец", "user")
        assert issued.token_type == "bearer"
        assert 0 < issued.expires_in <= 30 * 60

    def test_expired_token_rejected(self, jwt_manager: JWTManager):
        token, _, _ = jwt_manager.create_access_token(
            uuid.uuid4(), "Боец", "user", expires_delta=timedelta(seconds=-5)
        )
        assert jwt_manager.verify_access_token(token) is None

    def test_token_from_other_secret_rejected(self, jwt_manager: JWTManager):
        other = JWTManager(secret_key="another-secret", algorithm="HS256")
        token, _, _ = other.create_access_token(uuid.uuid4(), "Боец", "user")
        assert jwt_manager.verify_access_token(token) is None

    def test_garbage_rejected(self, jwt_manager: JWTManager):
        assert jwt_manager.verify_access_token("not-a-token") is None
