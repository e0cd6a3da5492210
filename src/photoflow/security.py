"""Password hashing helpers."""

import base64
import hashlib
from functools import cache

import bcrypt

DEFAULT_ROUNDS = 12
BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def _pre_hash(password: str) -> bytes:
    """Reduce any password to 44 bytes, below bcrypt's 72-byte input limit."""
    digest = hashlib.sha256(password.encode("utf-8")).digest()
    return base64.b64encode(digest)


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Return a bcrypt hash suitable for storage."""
    hashed = bcrypt.hashpw(_pre_hash(password), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def is_password_hash(value: str) -> bool:
    """Tell a stored bcrypt hash apart from a legacy plaintext password."""
    return value.startswith(BCRYPT_PREFIXES)


def verify_password(password: str, hashed_password: str) -> bool:
    """Check a password against a stored hash in constant time."""
    try:
        return bcrypt.checkpw(_pre_hash(password), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


@cache
def dummy_hash(rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash checked for unknown accounts so every login pays the bcrypt cost."""
    return hash_password("", rounds)
