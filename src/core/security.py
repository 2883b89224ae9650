"""Password hashing utilities."""

import hashlib
import hmac
import secrets

ALGORITHM = "pbkdf2_sha256"


def hash_password(password: str, iterations: int = 260000, salt_bytes: int = 16) -> str:
    """
    Hash a password with a random salt.

    Returns:
        "pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>"
    """
    salt = secrets.token_hex(salt_bytes)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("ascii"), iterations
    )
    return f"{ALGORITHM}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, encoded: str | None) -> bool:
    """Check a password against an encoded hash in constant time."""
    if not encoded:
        return False
    try:
        algorithm, iterations, salt, expected = encoded.split("$", 3)
        rounds = int(iterations)
    except ValueError:
        return False
    if algorithm != ALGORITHM:
        return False

    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("ascii"), rounds
    )
    return hmac.compare_digest(digest.hex(), expected)
