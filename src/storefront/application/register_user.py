"""Application service: Register User use case."""

from __future__ import annotations

import re

import structlog

from storefront.application.dto import UserDTO, user_to_dto
from storefront.domain.exceptions import DuplicateEmailError, ValidationError
from storefront.domain.model.user import Role, User
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.password_hasher import PasswordHasher

logger = structlog.get_logger(__name__)

MIN_PASSWORD_LENGTH = 8
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _email_taken() -> ValidationError:
    return ValidationError(
        "Registration failed.",
        {"email": "This email is already registered. Please use a different email or try logging in."},
    )


class RegisterUserHandler:

    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher) -> None:
        self._uow = uow
        self._hasher = hasher

    def handle(
        self,
        email: str | None,
        password: str | None,
        first_name: str | None,
        last_name: str | None,
        phone: str | None,
    ) -> UserDTO:
        """Create a customer account.

        Every field is required; all problems are reported together.
        """
        email = (email or "").strip().lower()
        password = password or ""
        first_name = (first_name or "").strip()
        last_name = (last_name or "").strip()
        phone = (phone or "").strip()

        errors: dict[str, str] = {}
        if not email:
            errors["email"] = "Email is required."
        elif not _EMAIL_RE.match(email):
            errors["email"] = "Invalid email format."
        if not password:
            errors["password"] = "Password is required."
        elif len(password) < MIN_PASSWORD_LENGTH:
            errors["password"] = (
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
            )
        if not first_name:
            errors["first_name"] = "First name is required."
        if not last_name:
            errors["last_name"] = "Last name is required."
        if not phone:
            errors["phone"] = "Phone number is required."
        if errors:
            raise ValidationError("Validation failed. Please check your input.", errors)

        with self._uow:
            if self._uow.users.get_by_email(email) is not None:
                raise _email_taken()
            user = User(
                id=None,
                email=email,
                password_hash=self._hasher.hash(password),
                first_name=first_name,
                last_name=last_name,
                phone=phone,
                role=Role.CUSTOMER,
            )
            try:
                self._uow.users.save(user)
            except DuplicateEmailError:
                # Registered by a concurrent request after the lookup above.
                raise _email_taken() from None
            self._uow.commit()

        logger.info("user_registered", user_id=user.id, email=user.email)
        return user_to_dto(user)
