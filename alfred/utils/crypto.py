"""Fernet helpers — keys derived from the app secret via PBKDF2."""

import base64
from functools import lru_cache

from cryptography.fernet import Fernet
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

SESSION_SALT = b"alfred-session-v1"
TOKEN_SALT = b"alfred-token-encryption-v1"


@lru_cache(maxsize=8)
def get_fernet(secret: str, salt: bytes) -> Fernet:
    """Derive a Fernet key from `secret` and return a Fernet instance.

    PBKDF2 at 100k iterations is slow, so instances are cached per
    (secret, salt).
    """
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=100_000,
    )
    key = base64.urlsafe_b64encode(kdf.derive(secret.encode()))
    return Fernet(key)
