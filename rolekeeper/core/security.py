"""Password hashing and JWT issuance/verification for authentication."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from rolekeeper.core.config import Settings, settings as default_settings
from rolekeeper.core.errors import (
    CredentialExpired,
    InvalidCredential,
    MissingCredential,
    Unauthorized,
)
from rolekeeper.schemas.auth import Actor

# Literal scheme marker expected at the start of the Authorization header.
BEARER_PREFIX = "Bearer "

# Bcrypt cost (rounds); overridden by settings.BCRYPT_ROUNDS at call sites.
BCRYPT_ROUNDS = 12


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors.
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(
    user_id: int,
    email: str,
    role: str,
    settings: Settings | None = None,
    issued_at: datetime | None = None,
) -> str:
    """Create a JWT embedding the actor identity (sub, email, role) with iat and exp."""
    settings = settings or default_settings
    now = issued_at or datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "exp": expire,
        "iat": now,
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str, settings: Settings | None = None) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, email, role, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    settings = settings or default_settings
    return jwt.decode(
        token,
        settings.JWT_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["sub", "exp", "iat"]},
    )


def verify_bearer(header_value: str | None, settings: Settings | None = None) -> Actor:
    """
    Verify an Authorization header value and return the embedded actor.

    The role returned is the role at issuance, not the currently stored one.
    """
    if not header_value or not header_value.startswith(BEARER_PREFIX):
        raise MissingCredential("Bearer token is required")

    token = header_value[len(BEARER_PREFIX):].strip()
    try:
        payload = decode_access_token(token, settings)
    except jwt.ExpiredSignatureError as e:
        raise CredentialExpired("Token has expired") from e
    except jwt.DecodeError as e:
        raise InvalidCredential("Invalid token") from e
    except jwt.PyJWTError as e:
        raise Unauthorized("Unauthorized") from e

    email = payload.get("email")
    role = payload.get("role")
    if not isinstance(email, str) or not isinstance(role, str):
        raise Unauthorized("Invalid token payload")
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise Unauthorized("Invalid token payload") from e
    return Actor(id=user_id, email=email, role=role)
