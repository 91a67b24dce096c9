"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

require_subject() is the pipeline stage placed ahead of every protected
handler (usually as a router-level dependency). It hands the Authorization
header to the AccessGate on app.state and either:
  - stores the authenticated subject id on request.state.subject_id and
    returns the AuthContext, or
  - raises HTTPException with the Rejection's status (401 missing, 403 invalid).

The gate never touches the store; handlers that need the full account look
it up themselves from the subject id.

Layer rule: auth/dependencies.py may import from fastapi because it is part
of the FastAPI dependency injection system. No imports from api/ or catalog/.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from auth.errors import Rejection
from auth.gate import AccessGate
from auth.models import AuthContext


def require_subject(request: Request) -> AuthContext:
    """Require a valid bearer token.

    Use as a FastAPI dependency:
        router = APIRouter(dependencies=[Depends(require_subject)])
        @router.get("/protected")
        def route(ctx: AuthContext = Depends(require_subject)): ...
    """
    gate: AccessGate = request.app.state.gate
    outcome = gate.authenticate(request.headers.get("Authorization"))
    if isinstance(outcome, Rejection):
        raise HTTPException(
            status_code=outcome.status_code,
            detail={"code": outcome.kind.value, "message": outcome.message},
        )
    request.state.subject_id = outcome.subject_id
    return outcome
