import uuid

import pytest

from userhub.models import User


def test_round_trip_keeps_public_fields():
    user = User(
        id=uuid.uuid4(),
        first_name="Test",
        last_name="Test",
        age=50,
        recording_date=1700000000,
    )
    assert User.from_dict(user.to_dict()) == user


def test_to_dict_leaves_out_deletion_flag():
    data = User(first_name="Ann", is_deleted=True).to_dict()
    assert "is_deleted" not in data
    assert set(data) == {"id", "first_name", "last_name", "age", "recording_date"}


def test_default_id_is_nil_uuid():
    assert User().id == uuid.UUID(int=0)
    assert User().to_dict()["id"] == str(uuid.UUID(int=0))


def test_from_dict_missing_fields_take_zero_values():
    user = User.from_dict({"first_name": "Ann"})
    assert user.first_name == "Ann"
    assert user.last_name == ""
    assert user.age == 0
    assert user.id == uuid.UUID(int=0)


def test_from_dict_ignores_deletion_flag_and_unknown_keys():
    user = User.from_dict({"first_name": "Ann", "is_deleted": True, "extra": 1})
    assert user.is_deleted is False


@pytest.mark.parametrize(
    "data",
    [
        {"id": "not-a-uuid"},
        {"id": 12},
        {"age": "50"},
        {"age": 50.5},
        {"age": True},
        {"first_name": 3},
        ["first_name"],
    ],
)
def test_from_dict_rejects_bad_values(data):
    with pytest.raises(ValueError):
        User.from_dict(data)