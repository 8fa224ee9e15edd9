"""Abstract repositories for users and their login sessions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from storefront.domain.model.user import Session, User


class UserRepository(ABC):

    @abstractmethod
    def get_by_id(self, user_id: int) -> User | None:
        """Return a user by ID, or None."""

    @abstractmethod
    def get_by_email(self, email: str) -> User | None:
        """Return a user by email (case-insensitive), or None."""

    @abstractmethod
    def save(self, user: User) -> None:
        """Persist a new or updated user (assigns ``id`` on insert).

        Raises ``DuplicateEmailError`` when the email is already taken.
        """


class SessionRepository(ABC):

    @abstractmethod
    def get(self, token: str) -> Session | None:
        """Return the session for a token, or None."""

    @abstractmethod
    def add(self, session: Session) -> None:
        """Store a freshly opened session."""

    @abstractmethod
    def delete(self, token: str) -> bool:
        """Remove a session; False if it did not exist."""

    @abstractmethod
    def delete_expired(self, now: datetime) -> int:
        """Purge sessions that expired before ``now``."""
