"""Password hashing for the user accounts (passlib + bcrypt)."""

from __future__ import annotations

# passlib probes bcrypt.__about__, which newer bcrypt releases dropped.
import logging
logging.getLogger("passlib.handlers.bcrypt").setLevel(logging.ERROR)

import warnings
warnings.filterwarnings("ignore", message=".*trapped.*error reading bcrypt version.*")

from passlib.context import CryptContext


# =============================================================================
# PASSWORD HASHING (bcrypt)
# =============================================================================

# Shared context; the cost factor is set at startup from BCRYPT_ROUNDS.
_pwd_ctx = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=10)


def configure_hashing(rounds: int) -> None:
    """
    Set the bcrypt cost factor used for new hashes.

    Existing hashes keep verifying whatever cost they were made with.

    Args:
        rounds: bcrypt log2 cost (4-31).
    """
    _pwd_ctx.update(bcrypt__rounds=rounds)


def hash_password(plain: str) -> str:
    """Return the bcrypt hash stored in place of a seeded password."""
    return _pwd_ctx.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """
    Compare a login password with a stored hash.

    Args:
        plain: Password sent to /api/auth/login.
        hashed: users.password_hash.

    Returns:
        True on a match.
    """
    return _pwd_ctx.verify(plain, hashed)
