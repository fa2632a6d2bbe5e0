"""Decoding and validation of user requests and query parameters."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class ValidationError(Exception):
    """Raised when a request fails decoding or validation."""

    def __init__(self, *errors: str) -> None:
        self.errors = list(errors)
        super().__init__(", ".join(self.errors))


@dataclass
class UserRequest:
    first_name: str = ""
    last_name: str = ""
    age: int = 0


@dataclass
class GetUserParams:
    first_name: str = ""
    last_name: str = ""
    age: int | None = None


@dataclass
class ListUsersParams:
    min_age: int | None = None
    max_age: int | None = None
    start_date: int | None = None
    end_date: int | None = None


class _Pairs(list):
    """Key/value pairs of a JSON object in document order."""


_REQUEST_FIELDS = {"first_name": "string", "last_name": "string", "age": "int"}


def _match_field(key: str) -> str | None:
    if key in _REQUEST_FIELDS:
        return key
    folded = key.casefold()
    return next((name for name in _REQUEST_FIELDS if name.casefold() == folded), None)


def _fits(value: Any, kind: str) -> bool:
    if kind == "string":
        return isinstance(value, str)
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and _INT64_MIN <= value <= _INT64_MAX
    )


def _build_request(value: Any) -> UserRequest:
    if value is None:
        return UserRequest()
    if not isinstance(value, _Pairs):
        raise ValidationError("field  must be like Request")
    fields: dict[str, Any] = {}
    first_error: str | None = None
    for key, raw in value:
        name = _match_field(key)
        if name is None:
            first_error = first_error or "unknown field JSON"
            continue
        if raw is None:
            continue
        kind = _REQUEST_FIELDS[name]
        if not _fits(raw, kind):
            first_error = first_error or f"field {name} must be like {kind}"
            continue
        fields[name] = raw
    if first_error is not None:
        raise ValidationError(first_error)
    return UserRequest(**fields)


def decode_json_body(body: bytes | str | None) -> UserRequest:
    """Decode the first JSON value of *body* into a request, rejecting unknown fields."""
    if body is None or len(body) == 0:
        raise ValidationError("body is nil")
    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
    start = len(text) - len(text.lstrip(" \t\r\n"))
    if start == len(text):
        raise ValidationError("JSON parsing error: EOF")
    # NaN and Infinity are not JSON; any occurrence is a syntax error.
    constants: list[str] = []
    decoder = json.JSONDecoder(object_pairs_hook=_Pairs, parse_constant=constants.append)
    try:
        value, _ = decoder.raw_decode(text, start)
    except json.JSONDecodeError as exc:
        if not constants and exc.pos >= len(text):
            raise ValidationError("JSON parsing error: unexpected EOF") from exc
        raise ValidationError("json syntax error") from exc
    if constants:
        raise ValidationError("json syntax error")
    return _build_request(value)


def validate_save_request(req: UserRequest) -> None:
    """Check that a new user has both names and an age between 1 and 120."""
    errors: list[str] = []
    if not req.first_name.strip():
        errors.append("enter your first_name")
    if not req.last_name.strip():
        errors.append("enter your last_name")
    if req.age <= 0:
        errors.append("age must be greater than zero")
    elif req.age > 120:
        errors.append("age must be less than 120")
    if errors:
        raise ValidationError(*errors)


def validate_get_user_params(params: GetUserParams) -> None:
    """Check search parameters: both names present, age within 0..120 if given."""
    errors: list[str] = []
    if params.first_name == "":
        errors.append("enter your first name")
    if params.last_name == "":
        errors.append("enter your last name")
    if params.age is not None:
        if params.age < 0:
            errors.append("age must be greater than zero")
        elif params.age > 120:
            errors.append("age must be less than 120")
    if errors:
        raise ValidationError(*errors)


def validate_list_users_params(params: ListUsersParams) -> None:
    """Check listing bounds: none negative and each range in order."""
    errors: list[str] = []
    if params.min_age is not None and params.min_age < 0:
        errors.append("min age must not be negative")
    if params.max_age is not None and params.max_age < 0:
        errors.append("max age must not be negative")
    if (
        params.min_age is not None
        and params.max_age is not None
        and params.min_age > params.max_age
    ):
        errors.append("min age must not be greater than max age")
    if params.start_date is not None and params.start_date < 0:
        errors.append("start date must not be negative")
    if params.end_date is not None and params.end_date < 0:
        errors.append("end date must not be negative")
    if (
        params.start_date is not None
        and params.end_date is not None
        and params.start_date > params.end_date
    ):
        errors.append("start date must not be greater than end date")
    if errors:
        raise ValidationError(*errors)