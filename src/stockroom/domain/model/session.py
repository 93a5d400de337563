"""Authenticated user and session as reported by the credential provider."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class User:
    id: str
    email: str
    full_name: str | None = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.email


@dataclass(frozen=True)
class Session:
    user: User
    access_token: str
    refresh_token: str | None = None
    expires_at: datetime | None = None
