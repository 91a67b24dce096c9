"""
auth/errors.py -- Rejection taxonomy for the authentication flows and gate.

Every expected failure in auth/ is a Rejection carrying a RejectionKind and a
caller-safe message. The API layer renders it into the shared error envelope;
nothing in auth/ knows about HTTP beyond the status code attached here.

  invalid_input       400  malformed or out-of-range registration data
  conflict            409  email already registered
  invalid_credential  400  wrong email/password at login
                      403  invalid, expired, or tampered token at the gate
  missing_credential  401  no token presented
  internal_error      500  store or hashing failure (detail goes to the log)

Store-level exceptions (StoreError, DuplicateEmailError) live here too so the
flows can catch them without importing SQLAlchemy.
"""

from __future__ import annotations

from enum import Enum


class RejectionKind(str, Enum):
    invalid_input = "invalid_input"
    conflict = "conflict"
    invalid_credential = "invalid_credential"
    missing_credential = "missing_credential"
    internal_error = "internal_error"


_DEFAULT_STATUS: dict[RejectionKind, int] = {
    RejectionKind.invalid_input: 400,
    RejectionKind.conflict: 409,
    RejectionKind.invalid_credential: 400,
    RejectionKind.missing_credential: 401,
    RejectionKind.internal_error: 500,
}


class Rejection(Exception):
    """A typed, caller-safe refusal.

    status_code defaults from the kind; the access gate overrides it to 403
    for invalid tokens.
    """

    def __init__(self, kind: RejectionKind, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code if status_code is not None else _DEFAULT_STATUS[kind]

    def __repr__(self) -> str:
        return f"Rejection({self.kind.value!r}, {self.message!r}, status_code={self.status_code})"


class StoreError(Exception):
    """The identity store could not complete an operation (I/O, driver, schema)."""


class DuplicateEmailError(StoreError):
    """Insert refused because an account with the same email already exists."""
