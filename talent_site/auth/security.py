from __future__ import annotations

import hmac
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt


_JWT_ALG = "HS256"
DEFAULT_EXPIRE_MINUTES = 24 * 60


def create_access_token(
    *,
    secret: str,
    subject: str,
    role: str,
    expires_minutes: int = DEFAULT_EXPIRE_MINUTES,
) -> str:
    if not secret:
        raise ValueError("jwt_secret_blank")

    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=max(1, int(expires_minutes)))

    payload: Dict[str, Any] = {
        "sub": str(subject),
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=_JWT_ALG)


def decode_access_token(*, token: str, secret: str) -> Dict[str, Any]:
    if not token:
        raise ValueError("token_blank")
    if not secret:
        raise ValueError("jwt_secret_blank")
    return jwt.decode(token, secret, algorithms=[_JWT_ALG])


def verify_access_token(*, token: str | None, secret: str) -> Optional[Dict[str, Any]]:
    """Decode a token, returning None on any failure (expired, malformed, bad signature)."""
    if not token:
        return None
    try:
        payload = decode_access_token(token=token, secret=secret)
    except (jwt.InvalidTokenError, ValueError):
        return None
    if not payload.get("sub"):
        return None
    return payload


def credentials_match(
    username: str | None,
    password: str | None,
    *,
    expected_username: str,
    expected_password: str,
) -> bool:
    """Byte-for-byte comparison against the single configured admin account."""
    # An unset admin password disables login entirely.
    if not expected_username or not expected_password:
        return False
    user_ok = hmac.compare_digest((username or "").encode("utf-8"), expected_username.encode("utf-8"))
    pass_ok = hmac.compare_digest((password or "").encode("utf-8"), expected_password.encode("utf-8"))
    return user_ok and pass_ok
