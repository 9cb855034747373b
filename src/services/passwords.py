"""Password hashing and strength rules."""

import os
import re
import secrets
from functools import lru_cache

import bcrypt

from domain.model.errors import ValidationError

# 2^12 iterations in production; tests lower this through the environment
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))
# bcrypt only reads the first 72 bytes; newer releases reject longer input
MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:MAX_PASSWORD_BYTES]


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(_encode(plain), hashed.encode("utf-8"))


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password(secrets.token_urlsafe(16))


def burn_verify(plain: str) -> None:
    """Run a verify against a throwaway hash.

    Used when there is no stored hash so the unknown-email path takes as
    long as a wrong-password check.
    """
    verify_password(plain, _dummy_hash())


def validate_password(password: str) -> None:
    if len(password) < 8:
        raise ValidationError("Password must be at least 8 characters")
    if not re.search(r"[A-Z]", password):
        raise ValidationError("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        raise ValidationError("Password must contain at least one lowercase letter")
    if not re.search(r"[0-9]", password):
        raise ValidationError("Password must contain at least one number")
    if not re.search(r"[^a-zA-Z0-9]", password):
        raise ValidationError("Password must contain at least one special character")
