"""Application services: resolve the acting user from a session token."""

from __future__ import annotations

from datetime import datetime, timezone

from storefront.application.dto import UserDTO, user_to_dto
from storefront.domain.exceptions import AuthenticationError, EntityNotFoundError
from storefront.domain.model.user import AuthenticatedUser
from storefront.domain.repository.unit_of_work import UnitOfWork


class CurrentUserHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, token: str | None) -> AuthenticatedUser:
        """Return the session's user, or raise AuthenticationError.

        Expired sessions are purged on sight.
        """
        if not token:
            raise AuthenticationError(
                "Authentication required. Please log in to access this resource.",
                {"auth": "No valid session found"},
            )

        with self._uow:
            session = self._uow.sessions.get(token)
            user = None
            if session is not None:
                if session.is_expired(datetime.now(timezone.utc)):
                    self._uow.sessions.delete(token)
                    self._uow.commit()
                    session = None
                else:
                    user = self._uow.users.get_by_id(session.user_id)

        if user is None:
            raise AuthenticationError(
                "Authentication required. Please log in to access this resource.",
                {"auth": "Session expired or invalid"},
            )
        return AuthenticatedUser.from_user(user)


class ShowProfileHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, actor: AuthenticatedUser) -> UserDTO:
        """Fresh profile data for the acting user."""
        with self._uow:
            user = self._uow.users.get_by_id(actor.id)
        if user is None:
            raise EntityNotFoundError("User not found.", {"user_id": actor.id})
        return user_to_dto(user)
