from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Protocol

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: Optional[str] = None
    user_metadata: Mapping[str, Any] = field(default_factory=dict)

    @property
    def role(self) -> Optional[str]:
        """Role marker recorded in the account's signup metadata, if any."""
        role = self.user_metadata.get("role")
        return str(role) if role is not None else None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "AuthUser":
        metadata = payload.get("user_metadata") or {}
        return cls(
            id=str(payload["id"]),
            email=payload.get("email"),
            user_metadata=dict(metadata) if isinstance(metadata, Mapping) else {},
        )


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    user: AuthUser
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_at": self.expires_at,
            "user": {"id": self.user.id, "email": self.user.email},
        }


class AuthProvider(Protocol):
    """Capability exposed by the hosted auth service.

    Implementations raise ``AuthenticationFailed`` for rejected credentials and
    ``RemoteUnavailable`` for transport/backend failures.
    """

    async def sign_in(self, email: str, password: str) -> AuthSession: ...

    async def sign_up(self, email: str, password: str, metadata: Mapping[str, Any]) -> AuthUser: ...

    async def sign_out(self, access_token: str) -> None: ...

    async def get_user(self, access_token: str) -> Optional[AuthUser]: ...
