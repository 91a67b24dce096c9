"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic beyond projection).
Stores and flows do the work.

Layer rule: no imports from api/, core/, or catalog/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Account:
    """An identity record.

    subject_id is an opaque UUID string generated at registration. It is the
    only identifier that travels inside session tokens and it never changes.

    email is stored in canonical lowercase form and is unique across accounts.
    username is a display string and may repeat.

    credential_hash is the bcrypt hash of the password. It must never be
    serialized into a response -- use public() for anything leaving the process.
    """

    subject_id: str
    username: str
    email: str
    credential_hash: str
    created_at: str | None = None

    def public(self) -> PublicAccount:
        return PublicAccount(subject_id=self.subject_id, username=self.username, email=self.email)


@dataclass(frozen=True)
class PublicAccount:
    """Outbound projection of an Account. Carries no credential material."""

    subject_id: str
    username: str
    email: str


@dataclass(frozen=True)
class AuthContext:
    """The authenticated identity attached to a request by the access gate."""

    subject_id: str
