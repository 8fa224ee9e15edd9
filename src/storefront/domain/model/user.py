"""Users, sessions and the authenticated-user context.

``AuthenticatedUser`` is what every use case receives to identify the
acting user.  It is built by the auth gate from a server-side session and
passed explicitly; nothing downstream reads ambient session state.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum


class Role(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


@dataclass
class User:
    id: int | None
    email: str
    password_hash: str
    first_name: str
    last_name: str
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    postal_code: str | None = None
    role: Role = Role.CUSTOMER
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime | None = None

    def promote(self) -> None:
        self.role = Role.ADMIN


@dataclass(frozen=True)
class AuthenticatedUser:
    id: int
    email: str
    role: Role = Role.CUSTOMER
    first_name: str | None = None
    last_name: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @staticmethod
    def from_user(user: User) -> AuthenticatedUser:
        return AuthenticatedUser(
            id=user.id,  # type: ignore[arg-type]
            email=user.email,
            role=user.role,
            first_name=user.first_name,
            last_name=user.last_name,
        )


@dataclass
class Session:
    """A server-side login session identified by an opaque random token."""

    token: str
    user_id: int
    created_at: datetime
    expires_at: datetime

    @staticmethod
    def open(user_id: int, lifetime_seconds: int, now: datetime | None = None) -> Session:
        now = now or datetime.now(timezone.utc)
        return Session(
            token=secrets.token_urlsafe(32),
            user_id=user_id,
            created_at=now,
            expires_at=now + timedelta(seconds=lifetime_seconds),
        )

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return now >= expires_at
