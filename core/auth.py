from __future__ import annotations

import time
from typing import Any

import jwt

ALGORITHM = "HS256"


def make_access_token(
    secret: str,
    sub: str,
    email: str,
    *,
    ttl_seconds: int = 60 * 60,
    audience: str | None = None,
) -> str:
    now = int(time.time())
    payload: dict[str, Any] = {
        "sub": str(sub),
        "email": str(email),
        "iat": now,
        "exp": now + int(ttl_seconds),
    }
    if audience:
        payload["aud"] = audience
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def verify_access_token(secret: str, token: str, *, audience: str | None = None) -> dict[str, Any] | None:
    """Return the token claims, or None if the signature, expiry or claims are bad."""
    options: dict[str, Any] = {"require": ["exp", "sub"]}
    if not audience:
        options["verify_aud"] = False
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            audience=audience or None,
            options=options,
        )
    except jwt.PyJWTError:
        return None
    if not str(payload.get("sub") or "").strip():
        return None
    return payload
