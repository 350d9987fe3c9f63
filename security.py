import secrets
import string
from typing import Optional
from werkzeug.security import generate_password_hash, check_password_hash

RANDOM_ALPHABET = string.ascii_lowercase + string.digits
PASSWORD_HASH_METHOD = "pbkdf2:sha256"

def hash_password(plaintext: str) -> Optional[str]:
    """Salted PBKDF2 hash of the password, or None when there is nothing to hash."""
    if not isinstance(plaintext, str) or len(plaintext) == 0:
        return None

    return generate_password_hash(plaintext, method=PASSWORD_HASH_METHOD)

def verify_password(hashed: Optional[str], plaintext: str) -> bool:
    if not isinstance(hashed, str) or not hashed or not isinstance(plaintext, str):
        return False
    return check_password_hash(hashed, plaintext)

def create_random_string(length: int) -> Optional[str]:
    # bool is an int subclass; reject it explicitly
    if isinstance(length, bool) or not isinstance(length, int) or length <= 0:
        return None

    return "".join(secrets.choice(RANDOM_ALPHABET) for _ in range(length))
