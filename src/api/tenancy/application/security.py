"""Security utilities for admin authentication.

Admin passwords are hashed with bcrypt. Admin session tokens are opaque
random strings; only their SHA-256 digest is stored, so a leaked
``admin_sessions`` table cannot be replayed.
"""

import hashlib
import secrets

import bcrypt

SESSION_TOKEN_PREFIX = "cgs_"

# Checked against when the username is unknown so both paths cost one bcrypt
_DUMMY_PASSWORD_HASH = bcrypt.hashpw(b"citygate-dummy", bcrypt.gensalt()).decode()


def generate_session_token() -> str:
    """Generate a URL-safe opaque session token with a cgs_ prefix.

    The prefix makes tokens easy to spot in secret scanners.
    """
    random_part = secrets.token_urlsafe(32).replace("-", "_")
    return f"{SESSION_TOKEN_PREFIX}{random_part}"


def hash_session_token(token: str) -> str:
    """Return the hex SHA-256 digest used as the session lookup key.

    Tokens carry 256 bits of entropy, so an unsalted fast hash is
    sufficient and lets the digest be indexed.
    """
    return hashlib.sha256(token.encode()).hexdigest()


def hash_password(password: str) -> str:
    """Hash an admin password using bcrypt with a generated salt."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str | None) -> bool:
    """Verify a password against its bcrypt hash.

    When ``password_hash`` is None a dummy hash is checked instead so the
    call takes the same time, and False is returned.

    Returns:
        True if the password matches, False otherwise
    """
    target = password_hash or _DUMMY_PASSWORD_HASH
    try:
        matched = bcrypt.checkpw(password.encode(), target.encode())
    except ValueError:
        # Invalid hash format
        return False
    return matched and password_hash is not None
