"""Domain service interface: password hashing.

The auth use cases only need to hash and verify; the algorithm (bcrypt)
is an infrastructure concern.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class PasswordHasher(ABC):

    @abstractmethod
    def hash(self, password: str) -> str:
        """Return a salted one-way hash of ``password``."""

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        """True if ``password`` matches ``password_hash``."""
