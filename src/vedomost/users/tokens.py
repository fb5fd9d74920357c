from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from ..core.constants import DEFAULT_TOKEN_DAYS, TOKEN_ALGORITHM
from ..core.exceptions import AuthorizationError


class TokenService:
    """Issue and verify HS256 bearer tokens carrying the profile id in ``sub``."""

    def __init__(self, secret_key: str, *, token_days: int = DEFAULT_TOKEN_DAYS):
        self._secret_key = secret_key
        self._lifetime = timedelta(days=int(token_days))

    def issue(self, profile_id: str, *, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        payload = {"sub": str(profile_id), "iat": now, "exp": now + self._lifetime}
        return jwt.encode(payload, self._secret_key, algorithm=TOKEN_ALGORITHM)

    def verify(self, token: str) -> str:
        """Return the profile id; invalid or expired tokens raise AuthorizationError (403)."""
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[TOKEN_ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise AuthorizationError("Token has expired")
        except jwt.InvalidTokenError:
            raise AuthorizationError("Token is invalid")

        sub = payload.get("sub")
        if not sub:
            raise AuthorizationError("Token is invalid")
        return str(sub)
