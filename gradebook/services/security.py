from __future__ import annotations

import hmac
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from gradebook.core.config import settings
from gradebook.core.errors import AuthenticationError
from gradebook.i18n.th_messages import AuthMessages
from gradebook.schemas.auth import Role

__all__ = [
    "Principal",
    "verify_teacher_password",
    "create_access_token",
    "decode_access_token",
    "principal_from_header",
]


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller: a teacher, or a student bound to their id."""

    role: Role
    subject: str


def verify_teacher_password(password: str) -> bool:
    return hmac.compare_digest(password.encode("utf-8"), settings.teacher_password.encode("utf-8"))


def create_access_token(subject: str, role: Role, expires_minutes: Optional[int] = None) -> str:
    """Issue an HS256 token carrying ``sub``, ``role``, ``exp``, ``nbf``, ``iss`` and ``aud``."""
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=expires_minutes or settings.access_token_expire_minutes)
    claims = {
        "sub": subject,
        "role": role.value,
        "exp": expire,
        "nbf": now,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Principal:
    """Validate a token and return its principal.

    Raises:
        AuthenticationError: bad signature, expired, wrong issuer/audience,
            or missing ``sub``/``role`` claims.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"leeway": 5},
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
        )
        return Principal(role=Role(payload["role"]), subject=str(payload["sub"]))
    except (JWTError, KeyError, ValueError) as exc:
        raise AuthenticationError(AuthMessages.INVALID_TOKEN, detail={"reason": str(exc)}) from exc


def principal_from_header(authorization: Optional[str]) -> Principal:
    if not authorization:
        raise AuthenticationError(AuthMessages.MISSING_TOKEN)
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthenticationError(AuthMessages.INVALID_TOKEN, detail={"reason": "expected 'Bearer <token>'"})
    return decode_access_token(parts[1])
