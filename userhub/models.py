"""Domain model for stored users."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

NIL_UUID = uuid.UUID(int=0)


def _string_field(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key} must be a string")
    return value


def _int_field(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field {key} must be an integer")
    return value


@dataclass
class User:
    """A user record; ``is_deleted`` is never part of the JSON form."""

    id: uuid.UUID = NIL_UUID
    first_name: str = ""
    last_name: str = ""
    age: int = 0
    recording_date: int = 0
    is_deleted: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready representation of the user."""
        return {
            "id": str(self.id),
            "first_name": self.first_name,
            "last_name": self.last_name,
            "age": self.age,
            "recording_date": self.recording_date,
        }

    @classmethod
    def from_dict(cls, data: Any) -> User:
        """Build a user from decoded JSON; missing or null fields keep their zero value."""
        if not isinstance(data, Mapping):
            raise ValueError("user must be a JSON object")
        raw_id = data.get("id")
        if raw_id is None:
            user_id = NIL_UUID
        elif isinstance(raw_id, str):
            user_id = uuid.UUID(raw_id)
        else:
            raise ValueError("field id must be a string")
        return cls(
            id=user_id,
            first_name=_string_field(data, "first_name"),
            last_name=_string_field(data, "last_name"),
            age=_int_field(data, "age"),
            recording_date=_int_field(data, "recording_date"),
        )