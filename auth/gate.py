"""
auth/gate.py -- Access gate for protected resources.

AccessGate.authenticate() takes the raw Authorization header value and
returns either an AuthContext or a Rejection. It never raises, never touches
the store, and keeps no state beyond the verifier it was built with, so
concurrent requests are checked independently.

  no header / "Bearer" with no token      -> missing_credential (401)
  any other scheme, bad or expired token  -> invalid_credential (403)

Fail-closed: anything that is not a verified token is a Rejection.

Layer rule: no imports from api/, core/, or catalog/.
"""

from __future__ import annotations

from auth.errors import Rejection, RejectionKind
from auth.models import AuthContext
from auth.tokens import TokenVerifier

_BEARER = "bearer"


class AccessGate:
    def __init__(self, verifier: TokenVerifier) -> None:
        self._verifier = verifier

    def authenticate(self, raw_header: str | None) -> AuthContext | Rejection:
        token = _extract_bearer(raw_header)
        if isinstance(token, Rejection):
            return token
        subject_id = self._verifier.verify(token)
        if subject_id is None:
            return _invalid()
        return AuthContext(subject_id=subject_id)


def _extract_bearer(raw_header: str | None) -> str | Rejection:
    if raw_header is None or not raw_header.strip():
        return _missing()
    parts = raw_header.strip().split(None, 1)
    if parts[0].lower() != _BEARER:
        return _invalid()
    if len(parts) == 1 or not parts[1].strip():
        return _missing()
    return parts[1].strip()


def _missing() -> Rejection:
    return Rejection(RejectionKind.missing_credential, "Access denied.")


def _invalid() -> Rejection:
    return Rejection(RejectionKind.invalid_credential, "Invalid token.", status_code=403)
