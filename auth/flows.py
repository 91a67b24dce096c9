"""
auth/flows.py -- Registration and login flows.

Both flows are plain functions that take their collaborators as arguments
(store, issuer, bcrypt cost) and either return a result or raise Rejection.
They know nothing about HTTP.

register():
  1. Shape check (username 4-20, well-formed email, password 6-15). Fails
     before any store access.
  2. Email pre-check -> conflict. The store's UNIQUE constraint is the real
     guard; DuplicateEmailError from insert() is also reported as conflict.
  3. New UUID4 subject id, bcrypt hash, atomic insert.
  4. Public projection out -- the hash never leaves this module.

login():
  Unknown email and wrong password produce the same invalid_credential
  message, and bcrypt runs against DUMMY_HASH when the email is unknown so
  response time does not reveal which emails are registered.

Store and hashing failures are logged with their traceback and surface as a
generic internal_error. Passwords are never logged.

Layer rule: no imports from api/, core/, or catalog/.
"""

from __future__ import annotations

import logging
import uuid

from pydantic import BaseModel, EmailStr, Field, ValidationError

from auth.errors import DuplicateEmailError, Rejection, RejectionKind, StoreError
from auth.models import Account, PublicAccount
from auth.passwords import DEFAULT_ROUNDS, DUMMY_HASH, hash_password, verify_password
from auth.store import AccountStore, canonical_email
from auth.tokens import TokenIssuer

logger = logging.getLogger("umovies.auth")

_INVALID_INPUT = "Please give valid inputs."
_EMAIL_TAKEN = "Email already exists."
_BAD_CREDENTIALS = "Invalid email or password."
_SERVER_ERROR = "Server error."


class RegistrationInput(BaseModel):
    """Shape rules for a new account."""

    username: str = Field(min_length=4, max_length=20)
    email: EmailStr
    password: str = Field(min_length=6, max_length=15)


def register(
    store: AccountStore,
    username: str,
    email: str,
    password: str,
    rounds: int = DEFAULT_ROUNDS,
) -> PublicAccount:
    """Create an account and return its public projection."""
    try:
        data = RegistrationInput(username=username, email=email, password=password)
    except ValidationError as exc:
        logger.info("Registration rejected: %d invalid field(s)", exc.error_count())
        raise Rejection(RejectionKind.invalid_input, _INVALID_INPUT) from None

    email = canonical_email(data.email)

    try:
        existing = store.find_by_email(email)
    except StoreError as exc:
        logger.exception("Registration lookup failed")
        raise Rejection(RejectionKind.internal_error, _SERVER_ERROR) from exc
    if existing is not None:
        raise Rejection(RejectionKind.conflict, _EMAIL_TAKEN)

    try:
        credential_hash = hash_password(data.password, rounds=rounds)
    except Exception as exc:
        logger.exception("Password hashing failed")
        raise Rejection(RejectionKind.internal_error, _SERVER_ERROR) from exc

    account = Account(
        subject_id=str(uuid.uuid4()),
        username=data.username,
        email=email,
        credential_hash=credential_hash,
    )
    try:
        created = store.insert(account)
    except DuplicateEmailError:
        # Lost a race with a concurrent registration for the same email.
        raise Rejection(RejectionKind.conflict, _EMAIL_TAKEN) from None
    except StoreError as exc:
        logger.exception("Account insert failed")
        raise Rejection(RejectionKind.internal_error, _SERVER_ERROR) from exc

    logger.info("Account created: subject_id=%s", created.subject_id)
    return created.public()


def login(store: AccountStore, issuer: TokenIssuer, email: str, password: str) -> tuple[PublicAccount, str]:
    """Verify credentials and return (public projection, session token)."""
    try:
        account = store.find_by_email(email)
    except StoreError as exc:
        logger.exception("Login lookup failed")
        raise Rejection(RejectionKind.internal_error, _SERVER_ERROR) from exc

    if account is None:
        # Equalize timing -- do NOT return before running bcrypt.
        verify_password(password, DUMMY_HASH)
        raise Rejection(RejectionKind.invalid_credential, _BAD_CREDENTIALS)
    if not verify_password(password, account.credential_hash):
        raise Rejection(RejectionKind.invalid_credential, _BAD_CREDENTIALS)

    token = issuer.issue(account.subject_id)
    logger.info("Login succeeded: subject_id=%s", account.subject_id)
    return account.public(), token
