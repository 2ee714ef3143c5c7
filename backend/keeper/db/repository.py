"""SQLAlchemy-backed storage for users and encrypted secrets.

Every query is scoped by owner id and secret type. Update and delete are
single conditional statements; a zero row count means NotFound.
"""
from dataclasses import dataclass

from sqlalchemy import select, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from keeper.core.errors import LoginExists, NotFound, StorageError, UserNotFound
from keeper.models.secret import Secret
from keeper.models.user import User


@dataclass(frozen=True)
class StoredSecret:
    id: str
    secret_type: str
    ciphertext: str
    meta: str


@dataclass(frozen=True)
class StoredUser:
    id: str
    login: str
    password_hash: str


def _to_stored(row: Secret) -> StoredSecret:
    return StoredSecret(id=row.id, secret_type=row.secret_type, ciphertext=row.ciphertext, meta=row.meta)


class SecretRepository:
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def add_data(self, owner_id: str, secret_type: str, ciphertext: str, meta: str) -> str:
        try:
            with self._session_factory.begin() as db:
                row = Secret(owner_id=owner_id, secret_type=secret_type, ciphertext=ciphertext, meta=meta)
                db.add(row)
                db.flush()
                return row.id
        except SQLAlchemyError as exc:
            raise StorageError("unable to add data") from exc

    def get_all_by_owner(self, owner_id: str, secret_type: str) -> list[StoredSecret]:
        query = (
            select(Secret)
            .where(
                Secret.owner_id == owner_id,
                Secret.secret_type == secret_type,
                Secret.is_deleted.is_(False),
            )
            .order_by(Secret.created_at)
        )
        try:
            with self._session_factory() as db:
                return [_to_stored(row) for row in db.scalars(query)]
        except SQLAlchemyError as exc:
            raise StorageError("unable to list data") from exc

    def get_by_owner_and_id(self, owner_id: str, secret_id: str, secret_type: str) -> StoredSecret:
        query = select(Secret).where(
            Secret.owner_id == owner_id,
            Secret.id == secret_id,
            Secret.secret_type == secret_type,
            Secret.is_deleted.is_(False),
        )
        try:
            with self._session_factory() as db:
                row = db.scalars(query).first()
        except SQLAlchemyError as exc:
            raise StorageError("unable to get data") from exc
        if row is None:
            raise NotFound("data not found")
        return _to_stored(row)

    def update_data(self, owner_id: str, secret_id: str, secret_type: str, ciphertext: str, meta: str) -> None:
        stmt = (
            update(Secret)
            .where(
                Secret.owner_id == owner_id,
                Secret.id == secret_id,
                Secret.secret_type == secret_type,
                Secret.is_deleted.is_(False),
            )
            .values(ciphertext=ciphertext, meta=meta)
        )
        self._execute_conditional(stmt, "unable to update data")

    def delete_by_id(self, owner_id: str, secret_id: str, secret_type: str) -> None:
        stmt = (
            update(Secret)
            .where(
                Secret.owner_id == owner_id,
                Secret.id == secret_id,
                Secret.secret_type == secret_type,
                Secret.is_deleted.is_(False),
            )
            .values(is_deleted=True)
        )
        self._execute_conditional(stmt, "unable to set deleted data")

    def ping(self) -> None:
        try:
            with self._session_factory() as db:
                db.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise StorageError("database is unreachable") from exc

    def _execute_conditional(self, stmt, message: str) -> None:
        try:
            with self._session_factory.begin() as db:
                result = db.execute(stmt)
        except SQLAlchemyError as exc:
            raise StorageError(message) from exc
        if result.rowcount == 0:
            raise NotFound("data not found")


class UserRepository:
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def create_user(self, login: str, password_hash: str) -> str:
        try:
            with self._session_factory.begin() as db:
                user = User(login=login, password_hash=password_hash)
                db.add(user)
                db.flush()
                return user.id
        except IntegrityError as exc:
            raise LoginExists(f"login {login!r} already exists") from exc
        except SQLAlchemyError as exc:
            raise StorageError("unable to create user") from exc

    def get_by_login(self, login: str) -> StoredUser:
        try:
            with self._session_factory() as db:
                user = db.scalars(select(User).where(User.login == login)).first()
        except SQLAlchemyError as exc:
            raise StorageError("unable to get user") from exc
        if user is None:
            raise UserNotFound("user not found")
        return StoredUser(id=user.id, login=user.login, password_hash=user.password_hash)
