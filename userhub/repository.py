"""User storage backed by a SQL database (PostgreSQL in production)."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Protocol

import sqlalchemy as sa
from sqlalchemy.engine import Engine

from .config import Config, ConfigError
from .models import User

metadata = sa.MetaData()

users_table = sa.Table(
    "users",
    metadata,
    sa.Column("id", sa.String(36), primary_key=True),
    sa.Column("first_name", sa.String(100), nullable=False),
    sa.Column("last_name", sa.String(100), nullable=False),
    sa.Column("age", sa.Integer, sa.CheckConstraint("age > 0"), nullable=False),
    sa.Column("recording_date", sa.BigInteger),
    sa.Column("created_at", sa.DateTime, server_default=sa.func.current_timestamp()),
    sa.Column("is_deleted", sa.Boolean, nullable=False, default=False),
)


class RepositoryError(Exception):
    """Raised when a storage operation fails."""


class UserDB(Protocol):
    """Operations the user service needs from storage."""

    def save_user(self, user: User) -> None: ...

    def delete_user(self, user: User) -> None: ...

    def soft_delete_user(self, user: User) -> None: ...

    def get_users(self, first_name: str, last_name: str, age: int) -> list[User]: ...

    def list_users(
        self,
        min_age: int | None,
        max_age: int | None,
        start_date: int | None,
        end_date: int | None,
    ) -> list[User]: ...

    def update_user(self, user: User) -> None: ...


def _row_to_user(row: sa.Row) -> User:
    mapping = row._mapping
    return User(
        id=uuid.UUID(mapping["id"]),
        first_name=mapping["first_name"],
        last_name=mapping["last_name"],
        age=mapping["age"],
        recording_date=mapping.get("recording_date") or 0,
    )


class PostgreSQL:
    """User repository over a SQLAlchemy engine."""

    def __init__(self, engine: Engine, logger: logging.Logger | None = None) -> None:
        self.engine = engine
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def connect(cls, cfg: Config, logger: logging.Logger | None = None) -> PostgreSQL:
        """Open the configured database, check it answers and run migrations."""
        op = "NewPostgreSQL"
        try:
            engine = sa.create_engine(cfg.database.url())
            with engine.connect() as conn:
                conn.execute(sa.text("SELECT 1"))
        except (sa.exc.SQLAlchemyError, ImportError, ConfigError) as exc:
            raise RepositoryError(f"op {op}: err {exc}") from exc
        repo = cls(engine, logger)
        try:
            repo.create_tables()
        except RepositoryError as exc:
            repo.logger.error("migration failed: %s", exc)
        return repo

    def create_tables(self) -> None:
        """Create the users table unless it already exists."""
        op = "CreateTables"
        self.logger.info("starting migrations")
        try:
            if sa.inspect(self.engine).has_table(users_table.name):
                self.logger.info("table users already exists")
                return
            metadata.create_all(self.engine, tables=[users_table])
        except sa.exc.SQLAlchemyError as exc:
            raise RepositoryError(f"op {op}: {exc}") from exc
        self.logger.info("table users created")

    def save_user(self, user: User) -> None:
        """Insert a user under a freshly generated id, stamped with the current time."""
        op = "CreateUser.SaveUser"
        statement = users_table.insert().values(
            id=str(uuid.uuid4()),
            first_name=user.first_name,
            last_name=user.last_name,
            age=user.age,
            recording_date=int(time.time()),
        )
        try:
            with self.engine.begin() as conn:
                conn.execute(statement)
        except sa.exc.SQLAlchemyError as exc:
            raise RepositoryError(f"op {op}: {exc}") from exc

    def get_users(self, first_name: str, last_name: str, age: int) -> list[User]:
        """Find users by case-insensitive name prefixes and, when positive, exact age."""
        op = "GetUserPostgreSQL"
        c = users_table.c
        statement = sa.select(c.id, c.first_name, c.last_name, c.age)
        if first_name:
            statement = statement.where(c.first_name.ilike(first_name + "%"))
        if last_name:
            statement = statement.where(c.last_name.ilike(last_name + "%"))
        if age > 0:
            statement = statement.where(c.age == age)
        try:
            with self.engine.connect() as conn:
                return [_row_to_user(row) for row in conn.execute(statement)]
        except sa.exc.SQLAlchemyError as exc:
            raise RepositoryError(f"op {op}: {exc}") from exc

    def list_users(
        self,
        min_age: int | None = None,
        max_age: int | None = None,
        start_date: int | None = None,
        end_date: int | None = None,
    ) -> list[User]:
        """List users that are not soft-deleted, within the given age and date bounds."""
        op = "ListUsersPostgreSQL"
        c = users_table.c
        statement = sa.select(
            c.id, c.first_name, c.last_name, c.age, c.recording_date
        ).where(c.is_deleted == sa.false())
        if min_age is not None:
            statement = statement.where(c.age >= min_age)
        if max_age is not None:
            statement = statement.where(c.age <= max_age)
        if start_date is not None:
            statement = statement.where(c.recording_date >= start_date)
        if end_date is not None:
            statement = statement.where(c.recording_date <= end_date)
        try:
            with self.engine.connect() as conn:
                return [_row_to_user(row) for row in conn.execute(statement)]
        except sa.exc.SQLAlchemyError as exc:
            raise RepositoryError(f"op {op}: {exc}") from exc

    def delete_user(self, user: User) -> None:
        """Remove the user's row outright."""
        op = "DeleteUser.DeleteUser"
        statement = users_table.delete().where(users_table.c.id == str(user.id))
        try:
            with self.engine.begin() as conn:
                conn.execute(statement)
        except sa.exc.SQLAlchemyError as exc:
            raise RepositoryError(f"op: {op}, error: {exc}") from exc

    def soft_delete_user(self, user: User) -> None:
        """Mark the user as deleted; fails if no row has that id."""
        op = "SoftDeleteUser.SoftDeleteUser"
        statement = (
            users_table.update()
            .where(users_table.c.id == str(user.id))
            .values(is_deleted=True)
        )
        try:
            with self.engine.begin() as conn:
                affected = conn.execute(statement).rowcount
        except sa.exc.SQLAlchemyError as exc:
            raise RepositoryError(f"op: {op}, error: {exc}") from exc
        if affected == 0:
            raise RepositoryError(f"op: {op}, rows: {user.id}")

    def update_user(self, user: User) -> None:
        """Change name and age of a user that is not soft-deleted."""
        op = "UpdateUser"
        c = users_table.c
        statement = (
            users_table.update()
            .where(c.id == str(user.id), c.is_deleted == sa.false())
            .values(first_name=user.first_name, last_name=user.last_name, age=user.age)
        )
        try:
            with self.engine.begin() as conn:
                affected = conn.execute(statement).rowcount
        except sa.exc.SQLAlchemyError as exc:
            raise RepositoryError(f"{op} {exc}") from exc
        if affected == 0:
            raise RepositoryError(f"User {user.first_name} not found")

    def close(self) -> None:
        """Release all pooled connections."""
        self.engine.dispose()