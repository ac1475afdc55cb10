"""Password hashing with the ``bcrypt`` library directly (>=4.0).

Only the hash is stored (users.password_hash); plain passwords never leave
the register/login request handlers.
"""

import bcrypt


def hash_password(plain: str) -> str:
    """Hash a plain-text password. Returns the utf-8 bcrypt hash string."""
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """True if plain matches the stored bcrypt hash."""
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
