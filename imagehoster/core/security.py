"""Password hashing helpers.

Credentials are stored as salted hashes; a login still succeeds only on an
exact password match.
"""

from werkzeug.security import check_password_hash, generate_password_hash

__all__ = ["hash_password", "verify_password"]


def hash_password(password: str) -> str:
    """Return a salted hash suitable for the users.password column."""
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    """Check a plaintext password against a stored hash."""
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)
