"""Unit tests for core/config.py -- Settings validation.

Covers:
- Production mode refuses to start without SECRET_KEY
- DEBUG mode generates a key
- Short keys, cheap bcrypt costs and non-positive lifetimes are rejected
- Token lifetime defaults to 7 days
"""

import pytest
from pydantic import ValidationError

from core.config import Settings

GOOD_KEY = "k" * 32


def _settings(**kwargs) -> Settings:
    # _env_file=None keeps a developer's local .env out of the test.
    return Settings(_env_file=None, **kwargs)


def test_missing_secret_is_fatal_in_production(monkeypatch):
    monkeypatch.delenv("SECRET_KEY", raising=False)
    with pytest.raises(ValidationError, match="SECRET_KEY is required"):
        _settings(debug=False)


def test_debug_generates_secret(monkeypatch):
    monkeypatch.delenv("SECRET_KEY", raising=False)
    settings = _settings(debug=True)
    assert len(settings.secret_key) >= 32


def test_short_secret_rejected():
    with pytest.raises(ValidationError, match="at least 32"):
        _settings(secret_key="short")


def test_bcrypt_rounds_floor():
    with pytest.raises(ValidationError, match="BCRYPT_ROUNDS"):
        _settings(secret_key=GOOD_KEY, bcrypt_rounds=4)


def test_non_positive_lifetime_rejected():
    with pytest.raises(ValidationError, match="TOKEN_LIFETIME_SECONDS"):
        _settings(secret_key=GOOD_KEY, token_lifetime_seconds=0)


def test_defaults(monkeypatch):
    monkeypatch.delenv("TOKEN_LIFETIME_SECONDS", raising=False)
    monkeypatch.delenv("BCRYPT_ROUNDS", raising=False)
    settings = _settings(secret_key=GOOD_KEY)
    assert settings.token_lifetime_seconds == 7 * 24 * 3600
    assert settings.bcrypt_rounds == 10
