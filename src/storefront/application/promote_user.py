"""Application service: Promote User to admin."""

from __future__ import annotations

from storefront.application.dto import UserDTO, user_to_dto
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.repository.unit_of_work import UnitOfWork


class PromoteUserHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, email: str) -> UserDTO:
        with self._uow:
            user = self._uow.users.get_by_email(email.strip().lower())
            if user is None:
                raise EntityNotFoundError(f"No user registered with email '{email}'")
            user.promote()
            self._uow.users.save(user)
            self._uow.commit()
        return user_to_dto(user)
