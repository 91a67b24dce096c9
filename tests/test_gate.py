"""Unit tests for auth/gate.py -- bearer-token access gate.

Covers every branch of AccessGate.authenticate():
- No header / blank header / bare "Bearer" -> missing_credential (401)
- Non-Bearer scheme, garbage, foreign-secret, expired -> invalid_credential (403)
- Valid token -> AuthContext with the token's subject
"""

from datetime import datetime, timedelta, timezone

import pytest

from auth.errors import Rejection, RejectionKind
from auth.gate import AccessGate
from auth.models import AuthContext
from auth.tokens import TokenIssuer, TokenVerifier

SECRET = "gate-test-secret-0123456789abcdef0123"


@pytest.fixture
def gate() -> AccessGate:
    return AccessGate(TokenVerifier(SECRET))


@pytest.mark.parametrize("header", [None, "", "   ", "Bearer", "Bearer   "])
def test_missing_credential(gate, header):
    outcome = gate.authenticate(header)
    assert isinstance(outcome, Rejection)
    assert outcome.kind is RejectionKind.missing_credential
    assert outcome.status_code == 401


@pytest.mark.parametrize("header", ["Bearer garbage", "Basic dXNlcjpwYXNz", "Token abc.def.ghi"])
def test_invalid_credential(gate, header):
    outcome = gate.authenticate(header)
    assert isinstance(outcome, Rejection)
    assert outcome.kind is RejectionKind.invalid_credential
    assert outcome.status_code == 403


def test_valid_token_yields_subject(gate):
    token = TokenIssuer(SECRET).issue("subject-abc")
    assert gate.authenticate(f"Bearer {token}") == AuthContext(subject_id="subject-abc")


def test_scheme_is_case_insensitive(gate):
    token = TokenIssuer(SECRET).issue("subject-abc")
    assert gate.authenticate(f"bearer {token}") == AuthContext(subject_id="subject-abc")


def test_foreign_secret_is_invalid(gate):
    token = TokenIssuer("some-other-secret-0123456789abcdef").issue("subject-abc")
    outcome = gate.authenticate(f"Bearer {token}")
    assert isinstance(outcome, Rejection)
    assert outcome.kind is RejectionKind.invalid_credential


def test_expired_token_is_invalid():
    issued_at = datetime(2026, 3, 1, tzinfo=timezone.utc)
    token = TokenIssuer(SECRET, clock=lambda: issued_at).issue("subject-abc")
    gate = AccessGate(TokenVerifier(SECRET, clock=lambda: issued_at + timedelta(days=8)))
    outcome = gate.authenticate(f"Bearer {token}")
    assert isinstance(outcome, Rejection)
    assert outcome.kind is RejectionKind.invalid_credential


def test_gate_is_idempotent(gate):
    token = TokenIssuer(SECRET).issue("subject-abc")
    header = f"Bearer {token}"
    assert gate.authenticate(header) == gate.authenticate(header)
