"""
Password hashing utilities using bcrypt.

Passwords are stored only as salted bcrypt hashes and checked by
re-hashing the candidate against the stored salt.
"""

import bcrypt

from shared.config.logging import get_logger

logger = get_logger(__name__)

BCRYPT_ROUNDS = 12
_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Example:
        hashed = hash_password("mypassword123")
        # Returns something like: $2b$12$...
    """
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """
    Verify a password against its hash.

    Anything that is not a bcrypt hash never verifies.
    """
    if not hashed_password or not hashed_password.startswith(_BCRYPT_PREFIXES):
        logger.warning("SECURITY: password check against a non-bcrypt hash")
        return False

    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def needs_rehash(hashed_password: str) -> bool:
    """
    Check if a stored hash should be replaced after a successful login.

    True for non-bcrypt values and for hashes made with fewer rounds
    than ``BCRYPT_ROUNDS``.
    """
    if not hashed_password.startswith(_BCRYPT_PREFIXES):
        return True

    # Format: $2b$<rounds>$<salt+hash>
    try:
        rounds = int(hashed_password.split("$")[2])
    except (IndexError, ValueError):
        return True
    return rounds < BCRYPT_ROUNDS
