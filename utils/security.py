from __future__ import annotations

from typing import Optional
from werkzeug.security import generate_password_hash, check_password_hash

# Hash compared against when the email is unknown, so both failure paths do the same work
_DUMMY_HASH = generate_password_hash("not-a-real-password", method="pbkdf2:sha256", salt_length=16)


def hash_password(plain: str, method: str = "pbkdf2:sha256", salt_length: int = 16) -> str:
    return generate_password_hash(plain or "", method=method, salt_length=salt_length)


def is_hashed(value: Optional[str]) -> bool:
    if not value:
        return False
    v = str(value)
    # Werkzeug hashes start with a method prefix like 'pbkdf2:sha256:' or 'scrypt:'
    return v.startswith("pbkdf2:") or v.startswith("scrypt:")


def verify_password(stored_value: Optional[str], candidate: str) -> bool:
    """Verify ``candidate`` against a stored Werkzeug hash.

    Plain text stored values are never accepted. When ``stored_value`` is
    empty (unknown account) a dummy hash is still checked.
    """
    if not is_hashed(stored_value):
        check_password_hash(_DUMMY_HASH, candidate or "")
        return False
    return check_password_hash(stored_value, candidate or "")
