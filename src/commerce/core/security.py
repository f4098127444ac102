"""Password hashing helpers."""

from argon2 import PasswordHasher
from argon2 import exceptions as argon_exc

_ph = PasswordHasher()


def hash_password(password: str) -> str:
    """Create an Argon2id hash of ``password``."""
    return _ph.hash(password)


def verify_password(password: str, stored_hash: str | None) -> bool:
    """Check ``password`` against a stored hash; a missing hash never matches."""
    if not stored_hash:
        return False
    try:
        return _ph.verify(stored_hash, password)
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False


def needs_rehash(stored_hash: str) -> bool:
    return _ph.check_needs_rehash(stored_hash)
