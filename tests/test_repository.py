import logging
import time
import uuid

import pytest
import sqlalchemy as sa
from sqlalchemy.pool import StaticPool

from userhub.config import Config, Database
from userhub.models import User
from userhub.repository import PostgreSQL, RepositoryError


def _engine():
    return sa.create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


@pytest.fixture
def repo():
    repository = PostgreSQL(_engine(), logging.getLogger("test-repo"))
    repository.create_tables()
    yield repository
    repository.close()


def _save(repo, first, last, age):
    repo.save_user(User(first_name=first, last_name=last, age=age))
    (user,) = repo.get_users(first, last, age)
    return user


def test_save_user_success(repo):
    repo.save_user(User(first_name="Test", last_name="Test", age=50))
    users = repo.get_users("Test", "Test", 50)
    assert len(users) == 1
    assert (users[0].first_name, users[0].last_name, users[0].age) == ("Test", "Test", 50)
    assert users[0].id != uuid.UUID(int=0)


def test_save_user_db_error():
    repository = PostgreSQL(_engine(), logging.getLogger("test-repo"))
    with pytest.raises(RepositoryError):
        repository.save_user(User(first_name="Test", last_name="Test", age=50))


def test_save_user_rejects_non_positive_age(repo):
    with pytest.raises(RepositoryError):
        repo.save_user(User(first_name="Test", last_name="Test", age=0))


def test_save_generates_new_id_each_time(repo):
    fixed = uuid.uuid4()
    repo.save_user(User(id=fixed, first_name="A", last_name="B", age=10))
    repo.save_user(User(id=fixed, first_name="A", last_name="B", age=10))
    ids = {user.id for user in repo.get_users("A", "B", 10)}
    assert len(ids) == 2
    assert fixed not in ids


def test_create_tables_is_idempotent(repo):
    repo.create_tables()
    assert sa.inspect(repo.engine).has_table("users")


def test_get_users_prefix_case_insensitive(repo):
    repo.save_user(User(first_name="Alice", last_name="Smith", age=30))
    repo.save_user(User(first_name="Alan", last_name="Stone", age=40))
    assert {u.first_name for u in repo.get_users("al", "", 0)} == {"Alice", "Alan"}
    assert [u.first_name for u in repo.get_users("ALI", "", 0)] == ["Alice"]
    assert [u.first_name for u in repo.get_users("", "st", 0)] == ["Alan"]
    assert [u.first_name for u in repo.get_users("", "", 40)] == ["Alan"]
    assert repo.get_users("Bob", "", 0) == []


def test_list_users_age_bounds(repo):
    for name, age in (("Young", 20), ("Middle", 40), ("Old", 60)):
        repo.save_user(User(first_name=name, last_name="X", age=age))
    assert {u.first_name for u in repo.list_users(30, None, None, None)} == {"Middle", "Old"}
    assert {u.first_name for u in repo.list_users(None, 40, None, None)} == {"Young", "Middle"}
    assert [u.first_name for u in repo.list_users(30, 50, None, None)] == ["Middle"]
    assert len(repo.list_users(None, None, None, None)) == 3


def test_list_users_date_bounds(repo):
    before = int(time.time())
    repo.save_user(User(first_name="Dated", last_name="X", age=30))
    after = int(time.time())
    (user,) = repo.list_users(None, None, before, after)
    assert before <= user.recording_date <= after
    assert repo.list_users(None, None, after + 1000, None) == []
    assert repo.list_users(None, None, None, before - 1000) == []


def test_soft_deleted_users_are_not_listed(repo):
    user = _save(repo, "Gone", "X", 30)
    _save(repo, "Kept", "X", 31)
    repo.soft_delete_user(user)
    assert [u.first_name for u in repo.list_users(None, None, None, None)] == ["Kept"]


def test_soft_delete_unknown_user_raises(repo):
    with pytest.raises(RepositoryError):
        repo.soft_delete_user(User(id=uuid.uuid4()))


def test_delete_user_removes_row(repo):
    user = _save(repo, "Temp", "X", 30)
    repo.delete_user(user)
    assert repo.get_users("Temp", "", 0) == []


def test_update_user_changes_fields(repo):
    user = _save(repo, "Old", "Name", 30)
    repo.update_user(User(id=user.id, first_name="New", last_name="Name", age=31))
    (updated,) = repo.get_users("New", "Name", 0)
    assert updated.id == user.id
    assert updated.age == 31


def test_update_soft_deleted_user_raises(repo):
    user = _save(repo, "Hidden", "X", 30)
    repo.soft_delete_user(user)
    with pytest.raises(RepositoryError, match="User Hidden not found"):
        repo.update_user(User(id=user.id, first_name="Hidden", last_name="X", age=32))


def test_connect_failure_raises():
    cfg = Config(
        database=Database(
            host="127.0.0.1",
            port="1",
            user="user",
            dbname="users",
            ssl_mode="disable",
        )
    )
    with pytest.raises(RepositoryError):
        PostgreSQL.connect(cfg, logging.getLogger("test-repo"))