"""Use cases for managing users on top of a storage backend."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from .models import User
from .repository import UserDB


class ServiceError(Exception):
    """Raised when a user operation fails in the storage layer."""


@contextmanager
def _operation(op: str) -> Iterator[None]:
    try:
        yield
    except Exception as exc:
        raise ServiceError(f"op {op}: err {exc}") from exc


class UserService:
    """Carries out user operations and logs their outcome."""

    def __init__(self, db: UserDB, log: logging.Logger | None = None) -> None:
        self.db = db
        self.log = log or logging.getLogger(__name__)

    def save_user(self, user: User) -> None:
        """Store a new user."""
        with _operation("SaveUser"):
            self.db.save_user(user)
        self.log.info("User created")

    def get_user(self, first_name: str, last_name: str, age: int) -> list[User]:
        """Find users by name prefixes and age."""
        with _operation("GetUser"):
            users = self.db.get_users(first_name, last_name, age)
        self.log.info("users found")
        return list(users)

    def list_users(
        self,
        min_age: int | None = None,
        max_age: int | None = None,
        start_date: int | None = None,
        end_date: int | None = None,
    ) -> list[User]:
        """List live users within the given age and recording-date bounds."""
        with _operation("ListUser"):
            users = self.db.list_users(min_age, max_age, start_date, end_date)
        self.log.info("users found")
        return list(users)

    def user_delete(self, user: User) -> None:
        """Remove a user permanently."""
        with _operation("DeleteUser"):
            self.db.delete_user(user)
        self.log.info("User deleted")

    def soft_user_delete(self, user: User) -> None:
        """Mark a user as deleted without removing the record."""
        with _operation("SoftUserDelete"):
            self.db.soft_delete_user(user)
        self.log.info("User soft-deleted")

    def user_update(self, user: User) -> None:
        """Change the name and age of an existing user."""
        with _operation("UserService.UserUpdate"):
            self.db.update_user(user)
        self.log.info("User updated")