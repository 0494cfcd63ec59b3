"""
Access code generation.

An access code is the shared secret a member types to sign in. Codes are
drawn from an alphabet without look-alike characters.
"""

import secrets
import string

# No 0/O or 1/I
ACCESS_CODE_ALPHABET = "".join(
    c for c in string.ascii_uppercase + string.digits if c not in "0O1I"
)
MIN_ACCESS_CODE_LENGTH = 6


def generate_access_code(length: int = 10) -> str:
    """Generate a random access code."""
    if length < MIN_ACCESS_CODE_LENGTH:
        raise ValueError(f"Access codes must be at least {MIN_ACCESS_CODE_LENGTH} characters")
    return "".join(secrets.choice(ACCESS_CODE_ALPHABET) for _ in range(length))


def normalize_access_code(code: str) -> str:
    """Codes are matched case-insensitively and without surrounding blanks."""
    return code.strip().upper()
