import hashlib
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from app.core.config import get_settings

ph = PasswordHasher(time_cost=3, memory_cost=64 * 1024, parallelism=2)
settings = get_settings()

EMAIL_TOKEN_BYTES = 32


def digest_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def new_email_token() -> tuple[str, str]:
    """Return a raw verification token and the digest that gets stored."""
    raw_token = secrets.token_urlsafe(EMAIL_TOKEN_BYTES)
    return raw_token, digest_token(raw_token)


def hash_password(plain: str) -> str:
    return ph.hash(plain)


def check_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    try:
        return ph.verify(hashed, plain)
    except (VerificationError, InvalidHashError):
        return False


def password_needs_rehash(hashed: str) -> bool:
    return ph.check_needs_rehash(hashed)


def issue_access_token(
    user_id: int, role: str, email: str, now: datetime | None = None
) -> str:
    now = now or datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "role": role,
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=settings.access_min)).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algo)


def decode_access_token(raw_token: str) -> dict[str, Any]:
    # Raises jwt.ExpiredSignatureError before the generic jwt.InvalidTokenError.
    return jwt.decode(
        raw_token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algo],
        options={"require": ["sub", "exp"]},
    )
