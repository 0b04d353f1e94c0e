from __future__ import annotations
from datetime import datetime, timezone
from typing import Any
import jwt

def peek_claims(token: str) -> dict[str, Any] | None:
    """Read a bearer token's claims without verifying it. Returns None for opaque tokens."""
    try:
        return jwt.decode(token, options={"verify_signature": False, "verify_exp": False})
    except jwt.PyJWTError:
        return None

def token_expired(token: str, now: datetime | None = None) -> bool:
    claims = peek_claims(token)
    if not claims or "exp" not in claims:
        return False
    now = now or datetime.now(timezone.utc)
    try:
        exp = float(claims["exp"])
    except (TypeError, ValueError):
        return False
    return now.timestamp() >= exp
