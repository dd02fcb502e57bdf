"""
Explicit authentication session.

Decoded once per request from the bearer token and handed to whatever needs to
know who is asking. Nothing here mutates it; login, logout and expiry are owned
by the auth routes and the token itself.
"""

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True)
class AuthSession:
    user_id: int
    username: str
    is_admin: bool = False
    expires_at: datetime | None = None

    @classmethod
    def from_claims(cls, claims: dict) -> "AuthSession":
        """Build a session from decoded JWT claims. Raises ValueError/TypeError on bad claims."""
        exp = claims.get("exp")
        return cls(
            user_id=int(claims.get("sub")),
            username=str(claims.get("username", "")),
            is_admin=bool(claims.get("is_admin", False)),
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None,
        )

    def is_user(self, user_id: int | None) -> bool:
        return user_id is not None and user_id == self.user_id
