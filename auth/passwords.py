"""
auth/passwords.py -- Credential hashing (bcrypt, direct usage, no passlib wrapper).

bcrypt is the right tool for low-entropy secrets: the per-call random salt
means two hashes of the same password never match, and the cost factor makes
offline brute-force expensive. checkpw re-derives with the salt and cost
embedded in the stored hash and compares in constant time.

The work is CPU-bound. Callers run it from synchronous route handlers, which
FastAPI executes in its threadpool, so it never blocks the event loop.

Layer rule: no imports from api/, core/, or catalog/.
"""

from __future__ import annotations

import bcrypt

DEFAULT_ROUNDS = 10


def hash_password(plain: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Return a bcrypt hash of the given plaintext password.

    bcrypt only considers the first 72 bytes of input. Registration caps
    passwords at 15 characters, well below that.
    """
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    Any malformed hash (wrong prefix, truncated, not ASCII) yields False.
    """
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except (ValueError, TypeError, UnicodeEncodeError):
        return False


# Timing equalization dummy hash.
# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones. The login flow verifies against it when the
# email is unknown, so response time does not reveal which emails exist.
DUMMY_HASH: str = hash_password("umovies_timing_dummy")
