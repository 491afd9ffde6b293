from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import uuid


class Tier(str, Enum):
    ANONYMOUS = "anonymous"
    PRIVILEGED = "privileged"


@dataclass(frozen=True)
class User:
    id: uuid.UUID
    email: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        raw_id = data.get("id")
        if not raw_id:
            raise ValueError("user id missing")
        return cls(id=uuid.UUID(str(raw_id)), email=str(data.get("email") or ""))

    def to_dict(self) -> dict[str, Any]:
        return {"id": str(self.id), "email": self.email}


@dataclass(frozen=True)
class AuthResponse:
    access_token: str
    token_type: str = "bearer"
    expires_in: int | None = None
    expires_at: int | None = None
    refresh_token: str | None = None
    user: dict[str, Any] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuthResponse":
        return cls(
            access_token=str(data.get("access_token") or ""),
            token_type=str(data.get("token_type") or "bearer"),
            expires_in=data.get("expires_in"),
            expires_at=data.get("expires_at"),
            refresh_token=data.get("refresh_token"),
            user=dict(data.get("user") or {}),
            raw=dict(data),
        )
