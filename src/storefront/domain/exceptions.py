"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the web and CLI layers can catch them uniformly.  Each exception carries
a human-readable message plus an optional ``errors`` payload (field errors,
stock violations, ...) that ends up in the error envelope.
"""

from __future__ import annotations

from typing import Any


class DomainException(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str, errors: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors if errors is not None else {}


class ValidationError(DomainException):
    """Input is missing or malformed, or a business rule was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist (or is not visible to the caller)."""


class AuthenticationError(DomainException):
    """No valid session, or the supplied credentials are wrong."""


class PermissionDeniedError(DomainException):
    """The caller is authenticated but lacks the required role."""


class EmptyCartError(DomainException):
    """Checkout was attempted with nothing in the cart."""


class InsufficientStockError(DomainException):
    """One or more products cannot supply the requested quantity."""

    def __init__(self, message: str, violations: list[dict]) -> None:
        super().__init__(message, {"items_with_insufficient_stock": violations})
        self.violations = violations


class StatusUnchangedError(DomainException):
    """A status update would leave the order exactly as it is."""


class ConflictError(DomainException):
    """A write collided with a uniqueness constraint."""


class DuplicateOrderNumberError(ConflictError):
    """The generated order number is already taken; safe to regenerate."""


class DuplicateCartLineError(ConflictError):
    """The owner already has a cart line for this product."""


class DuplicateEmailError(ConflictError):
    """Another account is already registered with this email."""
