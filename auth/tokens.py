"""
auth/tokens.py -- Session token issuance and verification.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with the server-held secret
       and carry only the subject id (sub), issued-at (iat), expiry (exp) and
       a random token id (jti). The jti keeps two tokens minted in the same
       second for the same account from being byte-identical.

  Expiry: exp is exactly iat + lifetime (7 days by default). There is no
       server-side session store and no revocation list -- a token is valid
       iff its signature verifies AND now < exp.

  Verification returns None on any failure (bad signature, malformed token,
       missing claims, expired). The access gate turns that into a Rejection.

  Secrets: TokenIssuer and TokenVerifier receive the secret through their
       constructors. The app lifespan builds one of each from Settings at
       startup and shares them read-only across requests. An empty secret is
       a startup error, never a per-request one.

  Clock: both classes accept a clock callable returning an aware UTC
       datetime so expiry behaviour can be exercised without sleeping.

Layer rule: no imports from api/, core/, or catalog/.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

logger = logging.getLogger("umovies.auth")

ALGORITHM = "HS256"
DEFAULT_LIFETIME = timedelta(days=7)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _require_secret(secret: str) -> str:
    if not secret:
        raise ValueError("A non-empty signing secret is required.")
    return secret


class TokenIssuer:
    """Mints signed bearer tokens. Performs no I/O."""

    def __init__(self, secret: str, lifetime: timedelta = DEFAULT_LIFETIME, clock: Clock = _utcnow) -> None:
        if lifetime <= timedelta(0):
            raise ValueError("Token lifetime must be positive.")
        self._secret = _require_secret(secret)
        self.lifetime = lifetime
        self._clock = clock

    def issue(self, subject_id: str) -> str:
        """Encode a signed JWT for subject_id valid for exactly self.lifetime."""
        issued_at = self._clock()
        payload = {
            "sub": subject_id,
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)


class TokenVerifier:
    """Checks signature and expiry of bearer tokens. Holds no mutable state."""

    def __init__(self, secret: str, clock: Clock = _utcnow) -> None:
        self._secret = _require_secret(secret)
        self._clock = clock

    def verify(self, token: str) -> str | None:
        """Return the subject id of a valid token, None on any failure.

        jose's own exp check is disabled in favour of the injected clock. A
        require_exp option would switch it back on against the wall clock, so
        presence of exp is checked below instead.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={
                    "verify_exp": False,
                    "require_iat": True,
                    "require_sub": True,
                },
            )
        except JWTError:
            return None

        exp = payload.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            return None
        if self._clock().timestamp() >= exp:
            logger.debug("Rejected expired token")
            return None

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            return None
        return subject
