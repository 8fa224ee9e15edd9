"""Application services: Login and Logout use cases.

A successful login opens a server-side session; the opaque token is all
the client ever holds.
"""

from __future__ import annotations

import structlog

from storefront.application.dto import LoginDTO, LogoutDTO, iso, user_to_dto
from storefront.domain.exceptions import AuthenticationError, ValidationError
from storefront.domain.model.user import Session
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.password_hasher import PasswordHasher

logger = structlog.get_logger(__name__)


class LoginHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: PasswordHasher,
        session_lifetime_seconds: int,
    ) -> None:
        self._uow = uow
        self._hasher = hasher
        self._lifetime = session_lifetime_seconds

    def handle(self, email: str | None, password: str | None) -> LoginDTO:
        email = (email or "").strip().lower()
        password = password or ""

        errors: dict[str, str] = {}
        if not email:
            errors["email"] = "Email is required."
        if not password:
            errors["password"] = "Password is required."
        if errors:
            raise ValidationError("Validation failed. Please check your input.", errors)

        with self._uow:
            user = self._uow.users.get_by_email(email)
            # Same answer for an unknown email and a wrong password.
            if user is None or not self._hasher.verify(password, user.password_hash):
                raise AuthenticationError(
                    "Invalid credentials.", {"auth": "Email or password is incorrect."}
                )

            session = Session.open(user.id, self._lifetime)  # type: ignore[arg-type]
            self._uow.sessions.add(session)
            self._uow.commit()

        logger.info("user_logged_in", user_id=user.id)
        return LoginDTO(
            session_token=session.token,
            expires_at=iso(session.expires_at),  # type: ignore[arg-type]
            user=user_to_dto(user),
        )


class LogoutHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, token: str | None) -> LogoutDTO:
        if not token:
            return LogoutDTO(logged_out=False)
        with self._uow:
            removed = self._uow.sessions.delete(token)
            self._uow.commit()
        return LogoutDTO(logged_out=removed)
