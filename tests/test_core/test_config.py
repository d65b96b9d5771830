"""
Tests for settings helpers and token handling
"""
import pytest
from fastapi import HTTPException

from gestion.core.auth import create_access_token, decode_token, hash_password, verify_password
from gestion.core.config import Environment, Settings, parse_duration


class TestParseDuration:

    @pytest.mark.parametrize("value,expected", [
        ("15m", 900),
        ("7d", 604800),
        ("2h", 7200),
        ("3600", 3600),
        ("45s", 45),
    ])
    def test_units(self, value, expected):
        assert parse_duration(value) == expected

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_duration("quince minutos")


class TestSettings:

    def test_origins_from_comma_separated(self):
        settings = Settings(ALLOWED_ORIGINS="http://a.co, http://b.co")

        assert settings.get_allowed_origins() == ["http://a.co", "http://b.co"]

    def test_origins_from_json(self):
        settings = Settings(ALLOWED_ORIGINS='["http://a.co"]')

        assert settings.get_allowed_origins() == ["http://a.co"]

    def test_origins_default_to_frontend(self):
        settings = Settings(ALLOWED_ORIGINS=None, FRONTEND_URL="http://front.co")

        assert settings.get_allowed_origins() == ["http://front.co"]

    def test_unknown_environment_is_development(self):
        assert Settings(NODE_ENV="qa").get_environment() == Environment.DEVELOPMENT
        assert Settings(NODE_ENV="PRODUCTION").is_production()
        assert Settings(NODE_ENV="staging").is_staging()


class TestTokens:

    def test_access_token_round_trip(self, admin_user):
        payload = decode_token(create_access_token(admin_user), "access")

        assert payload["sub"] == admin_user.id
        assert payload["email"] == "admin@example.com"
        assert payload["type"] == "access"

    def test_access_token_is_not_a_refresh_token(self, admin_user):
        with pytest.raises(HTTPException) as exc:
            decode_token(create_access_token(admin_user), "refresh")

        assert exc.value.status_code == 401

    def test_password_hashing(self):
        hashed = hash_password("secreto1")

        assert hashed != "secreto1"
        assert verify_password("secreto1", hashed)
        assert not verify_password("otro", hashed)
