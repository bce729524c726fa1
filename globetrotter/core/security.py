"""Password hashing and session cookie signing."""
from typing import Optional
import secrets
import bcrypt
import jwt

from globetrotter.config.settings import settings

COOKIE_ALG = "HS256"
BCRYPT_ROUNDS = 12
# bcrypt only looks at the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Hash a password with a per-password bcrypt salt."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a stored bcrypt hash."""
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


def sign_session_id(session_id: str, secret: Optional[str] = None) -> str:
    """Wrap a session id in an HS256 signature for the session cookie."""
    return jwt.encode({"sid": session_id}, secret or settings.session.secret, algorithm=COOKIE_ALG)


def unsign_session_id(token: str, secret: Optional[str] = None) -> Optional[str]:
    """Return the session id carried by a cookie value, or None if tampered."""
    try:
        payload = jwt.decode(token, secret or settings.session.secret, algorithms=[COOKIE_ALG])
    except jwt.PyJWTError:
        return None
    sid = payload.get("sid")
    return sid if isinstance(sid, str) and sid else None
