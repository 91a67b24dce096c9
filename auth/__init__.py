"""auth/ -- Credential and session-authentication package.

Components: passwords (bcrypt hashing), store (account repository),
tokens (JWT issuer/verifier), gate (bearer-token access gate),
flows (registration and login), dependencies (FastAPI glue).

Layer rule: auth/ imports only stdlib + third-party libraries.
It does NOT import from api/, core/, or catalog/.
api/ imports from auth/, not the other way around.
"""
