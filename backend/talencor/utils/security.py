"""
Password hashing, signed session tokens and client access codes.
No plain-text passwords or full access codes in logs.
Uses bcrypt directly (not passlib) to avoid passlib's 72-byte internal test.
"""
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from talencor.config import get_settings
from talencor.utils.logger import get_logger

logger = get_logger(__name__)

# Bcrypt accepts max 72 bytes; truncate to avoid ValueError
BCRYPT_MAX_PASSWORD_BYTES = 72
BCRYPT_ROUNDS = 12

SESSION_TOKEN_TYPE = "session"
ACCESS_CODE_LENGTH = 6


def _to_bcrypt_bytes(s: str) -> bytes:
    """Truncate password to 72 bytes for bcrypt (required by algorithm)."""
    raw = (s or "").encode("utf-8")
    if len(raw) <= BCRYPT_MAX_PASSWORD_BYTES:
        return raw
    return raw[:BCRYPT_MAX_PASSWORD_BYTES]


def hash_password(plain_password: str) -> str:
    """Hash password with bcrypt (cost factor 12)."""
    secret = _to_bcrypt_bytes(plain_password)
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(secret, salt).decode("ascii")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify plain password against hash. A malformed hash never verifies."""
    secret = _to_bcrypt_bytes(plain_password)
    try:
        return bcrypt.checkpw(secret, (hashed or "").encode("ascii"))
    except ValueError:
        return False


def create_session_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """Sign session data into a JWT. Only JSON-serialisable values belong in ``data``."""
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(hours=settings.session_max_age_hours)
    )
    to_encode = {"data": data, "exp": expire, "type": SESSION_TOKEN_TYPE}
    return jwt.encode(
        to_encode,
        settings.session_secret,
        algorithm=settings.jwt_algorithm,
    )


def decode_session_token(token: str | None) -> dict[str, Any]:
    """Decode and validate a session token. Returns the session data or an empty dict."""
    if not token:
        return {}
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.session_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return {}
    if payload.get("type") != SESSION_TOKEN_TYPE:
        return {}
    data = payload.get("data")
    return data if isinstance(data, dict) else {}


def generate_access_code(length: int = ACCESS_CODE_LENGTH) -> str:
    """Random numeric access code without a leading zero."""
    first = str(secrets.randbelow(9) + 1)
    rest = "".join(str(secrets.randbelow(10)) for _ in range(length - 1))
    return first + rest


def mask_access_code(code: str | None) -> str:
    """Keep the first three characters for audit trails."""
    return (code or "")[:3] + "***"


def new_visitor_id() -> str:
    """Opaque identifier for anonymous visitors (question-bank favourites)."""
    return secrets.token_urlsafe(16)
