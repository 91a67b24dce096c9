"""
API request and response models for the umovies REST endpoints.

These Pydantic v2 models define the HTTP transport contract. They are
intentionally separate from the dataclasses in auth/models.py, which own the
internal domain representation. Route handlers map between the two.

Request models only require the fields to be strings. The length and email
rules live in auth/flows.py so they hold for any caller, and a violation is
reported as invalid_input (400) rather than a schema error. Passwords are
passed through untouched; no whitespace stripping on request bodies.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from auth.models import PublicAccount

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /register."""

    username: str
    email: str
    password: str


class LoginRequest(BaseModel):
    """Request body for POST /login."""

    email: str
    password: str


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class AccountOut(BaseModel):
    """Public projection of an account. Never carries the password hash."""

    model_config = ConfigDict(frozen=True)

    userId: str
    username: str
    email: str

    @classmethod
    def from_public(cls, account: PublicAccount) -> "AccountOut":
        return cls(userId=account.subject_id, username=account.username, email=account.email)


class RegisterResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str = "User created successfully"
    user: AccountOut


class LoginResponse(BaseModel):
    """Response for POST /login.

    jwt_token must be sent back verbatim as "Authorization: Bearer <token>".
    """

    model_config = ConfigDict(frozen=True)

    message: str = "Sign in successful"
    jwt_token: str
    token_type: str = "bearer"
    expires_in: int
    user: AccountOut


class ProfileResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    userDetails: AccountOut


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]


# ---------------------------------------------------------------------------
# Catalog -- documents are schema-free, so payloads are plain dicts
# ---------------------------------------------------------------------------


class CatalogListResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    results: list[dict]
    total: int


class TrendingResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: list[dict]
    status: str = "SUCCESS"


class PopularResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    results: list[dict]
    length: int


class MovieDetailResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    movie_details: dict
