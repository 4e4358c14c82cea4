"""Session tokens issued after a successful Farcaster sign-in."""

import time
from typing import Any, Dict, Optional

import jwt

from app.core.exceptions import AuthError, TokenExpired, TokenMalformed

SESSION_ALGORITHM = "HS256"


def issue_session_token(user_id: str, fid: str, secret: str, ttl_seconds: int, now: Optional[int] = None) -> str:
    issued_at = int(time.time()) if now is None else now
    payload = {
        "sub": user_id,
        "fid": str(fid),
        "iat": issued_at,
        "exp": issued_at + ttl_seconds,
    }
    return jwt.encode(payload, secret, algorithm=SESSION_ALGORITHM)


def decode_session_token(token: str, secret: str) -> Dict[str, Any]:
    """Validate structure and expiry, return the claims."""
    if not token or not token.strip():
        raise TokenMalformed("Token is required")
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[SESSION_ALGORITHM],
            options={"require": ["sub", "fid", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpired("Token expired")
    except jwt.InvalidSignatureError:
        raise AuthError("Invalid token")
    except jwt.InvalidTokenError as e:
        raise TokenMalformed(f"Invalid token format: {e}")
