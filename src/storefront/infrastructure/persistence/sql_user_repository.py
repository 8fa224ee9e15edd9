"""SQLAlchemy-backed implementations of UserRepository and SessionRepository."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session as OrmSession

from storefront.domain.exceptions import DuplicateEmailError
from storefront.domain.model.user import Role, Session, User
from storefront.domain.repository.user_repository import SessionRepository, UserRepository
from storefront.infrastructure.persistence.tables import SessionRow, UserRow


class SqlUserRepository(UserRepository):

    def __init__(self, session: OrmSession) -> None:
        self._session = session

    def get_by_id(self, user_id: int) -> User | None:
        row = self._session.get(UserRow, user_id)
        return self._to_domain(row) if row is not None else None

    def get_by_email(self, email: str) -> User | None:
        stmt = select(UserRow).where(func.lower(UserRow.email) == email.strip().lower())
        row = self._session.scalars(stmt).first()
        return self._to_domain(row) if row is not None else None

    def save(self, user: User) -> None:
        row = self._session.get(UserRow, user.id) if user.id is not None else None
        if row is None:
            row = UserRow(created_at=user.created_at)
        else:
            user.updated_at = datetime.now(timezone.utc)

        try:
            # Savepoint: a taken email undoes only this write.
            with self._session.begin_nested():
                self._fill(row, user)
                self._session.add(row)
                self._session.flush()
        except IntegrityError:
            taken = self.get_by_email(user.email)
            if taken is not None and taken.id != user.id:
                raise DuplicateEmailError(
                    "Email is already registered.", {"email": user.email}
                ) from None
            raise
        user.id = row.id

    @staticmethod
    def _fill(row: UserRow, user: User) -> None:
        row.email = user.email
        row.password_hash = user.password_hash
        row.first_name = user.first_name
        row.last_name = user.last_name
        row.phone = user.phone
        row.address = user.address
        row.city = user.city
        row.postal_code = user.postal_code
        row.role = user.role.value
        row.updated_at = user.updated_at

    @staticmethod
    def _to_domain(row: UserRow) -> User:
        return User(
            id=row.id,
            email=row.email,
            password_hash=row.password_hash,
            first_name=row.first_name,
            last_name=row.last_name,
            phone=row.phone,
            address=row.address,
            city=row.city,
            postal_code=row.postal_code,
            role=Role(row.role),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class SqlSessionRepository(SessionRepository):

    def __init__(self, session: OrmSession) -> None:
        self._session = session

    def get(self, token: str) -> Session | None:
        row = self._session.get(SessionRow, token)
        if row is None:
            return None
        return Session(
            token=row.token,
            user_id=row.user_id,
            created_at=row.created_at,
            expires_at=row.expires_at,
        )

    def add(self, session: Session) -> None:
        self._session.add(
            SessionRow(
                token=session.token,
                user_id=session.user_id,
                created_at=session.created_at,
                expires_at=session.expires_at,
            )
        )
        self._session.flush()

    def delete(self, token: str) -> bool:
        result = self._session.execute(
            delete(SessionRow)
            .where(SessionRow.token == token)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    def delete_expired(self, now: datetime) -> int:
        result = self._session.execute(
            delete(SessionRow)
            .where(SessionRow.expires_at < now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
