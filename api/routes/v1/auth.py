"""
api/routes/v1/auth.py -- Registration, login, and profile endpoints.

Routes:
  POST /register  -- create an account; 201 with the public projection
  POST /login     -- verify credentials; 200 with a bearer token
  GET  /profile   -- the authenticated caller's public projection

Register and login are plain `def` handlers: FastAPI runs them in its worker
threadpool, so bcrypt's CPU cost never blocks the event loop that serves
token-gated reads.

Errors: the flows raise Rejection; the handler registered in api/main.py
renders it (with Cache-Control: no-store). Both public routes are
rate-limited per client IP.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from api.limiter import limiter, login_limit, register_limit
from api.models import AccountOut, LoginRequest, LoginResponse, ProfileResponse, RegisterRequest, RegisterResponse
from auth import flows
from auth.dependencies import require_subject
from auth.errors import Rejection, RejectionKind, StoreError
from auth.models import AuthContext
from auth.store import AccountStore
from auth.tokens import TokenIssuer

# Auth policy:
# - POST /register: public
# - POST /login:    public
# - GET  /profile:  requires a bearer token (require_subject)
router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=201)
@limiter.limit(register_limit)
def register(request: Request, body: RegisterRequest) -> RegisterResponse:
    """Create an account. The response never includes the password or its hash."""
    store: AccountStore = request.app.state.account_store
    account = flows.register(
        store,
        body.username,
        body.email,
        body.password,
        rounds=request.app.state.bcrypt_rounds,
    )
    return RegisterResponse(user=AccountOut.from_public(account))


@router.post("/login", response_model=LoginResponse)
@limiter.limit(login_limit)
def login(request: Request, response: Response, body: LoginRequest) -> LoginResponse:
    """Authenticate with email and password and return a session token.

    Wrong email and wrong password get the same invalid_credential error.
    """
    store: AccountStore = request.app.state.account_store
    issuer: TokenIssuer = request.app.state.token_issuer
    account, token = flows.login(store, issuer, body.email, body.password)
    response.headers["Cache-Control"] = "no-store"
    return LoginResponse(
        jwt_token=token,
        expires_in=int(issuer.lifetime.total_seconds()),
        user=AccountOut.from_public(account),
    )


@router.get("/profile", response_model=ProfileResponse)
def profile(
    request: Request,
    response: Response,
    ctx: AuthContext = Depends(require_subject),
) -> ProfileResponse:
    """Return the public projection of the account the token belongs to."""
    store: AccountStore = request.app.state.account_store
    try:
        account = store.find_by_id(ctx.subject_id)
    except StoreError as exc:
        raise Rejection(RejectionKind.internal_error, "Server error.") from exc
    if account is None:
        raise HTTPException(
            status_code=404,
            detail={"code": "not_found", "message": "Account not found."},
        )
    response.headers["Cache-Control"] = "private, no-store"
    return ProfileResponse(userDetails=AccountOut.from_public(account.public()))
