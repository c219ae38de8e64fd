"""Security utilities: password hashing and access tokens."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from tenantnotes.core.config import get_settings

settings = get_settings()

# ── Password hashing (Argon2) ────────────────────────────────

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


# ── Access tokens (JWT) ──────────────────────────────────────
#
# Tokens are stateless: validity depends only on signature and expiry.
# Logging out cannot invalidate a token server-side before it expires.

@dataclass(frozen=True)
class VerifiedToken:
    user_id: uuid.UUID
    expires_at: datetime


@dataclass(frozen=True)
class InvalidToken:
    reason: str


def ensure_signing_key() -> None:
    if not settings.jwt_secret_key:
        raise RuntimeError("JWT_SECRET_KEY is not configured")


def issue_access_token(user_id: uuid.UUID, expires_delta: timedelta | None = None) -> str:
    """Sign a token for ``user_id`` with an absolute expiry."""
    ensure_signing_key()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_access_token(token: str) -> VerifiedToken | InvalidToken:
    """Check signature and expiry. Never raises; failures come back as ``InvalidToken``."""
    if not isinstance(token, str) or token.count(".") != 2:
        return InvalidToken("malformed")

    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        return InvalidToken("expired")
    except JWTError:
        return InvalidToken("bad_signature")

    try:
        user_id = uuid.UUID(payload["sub"])
        expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
    except (KeyError, TypeError, ValueError, OverflowError):
        return InvalidToken("malformed")

    return VerifiedToken(user_id=user_id, expires_at=expires_at)
