"""HTTP request handlers for the user API."""

from __future__ import annotations

import json
import logging
import re
import uuid
from dataclasses import asdict
from typing import Any

from flask import Response, request

from .models import User
from .validation import (
    GetUserParams,
    ListUsersParams,
    ValidationError,
    decode_json_body,
    validate_get_user_params,
    validate_list_users_params,
    validate_save_request,
)

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_JSON_ESCAPES = str.maketrans(
    {
        "<": "\\u003c",
        ">": "\\u003e",
        "&": "\\u0026",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)


def _parse_int(text: str, func: str) -> int:
    """Parse a signed decimal 64-bit integer, failing with a strconv-style message."""
    quoted = json.dumps(text, ensure_ascii=False)
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"strconv.{func}: parsing {quoted}: invalid syntax")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"strconv.{func}: parsing {quoted}: value out of range")
    return value


def _json_response(status: int, payload: Any) -> Response:
    body = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    return Response(
        body.translate(_JSON_ESCAPES) + "\n",
        status=status,
        content_type="application/json",
    )


def _error_response(status: int, message: str) -> Response:
    return _json_response(status, {"errors": [message]})


def _plain_error(status: int, message: str) -> Response:
    response = Response(
        message + "\n", status=status, content_type="text/plain; charset=utf-8"
    )
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response


def _users_payload(users: list[User]) -> list[dict[str, Any]] | None:
    # An empty result is reported as null, as the API has always done.
    return [user.to_dict() for user in users] or None


class Handler:
    """Flask view callables for the user endpoints."""

    def __init__(self, user_service: Any, log: logging.Logger | None = None) -> None:
        self.user_service = user_service
        self.log = log or logging.getLogger(__name__)

    def _log_error(self, message: str, op: str, exc: BaseException | None = None, **fields: Any) -> None:
        data: dict[str, Any] = {"op": op, **fields}
        if exc is not None:
            data["error"] = str(exc)
        self.log.error(message, extra={"fields": data})

    def _read_body(self, op: str) -> Response | None:
        try:
            decode_json_body(request.get_data())
        except ValidationError as exc:
            self._log_error("error validation JSON", op, exc)
            return _plain_error(400, str(exc))
        return None

    def save_user(self) -> Response:
        """POST /users: create a user from a JSON body."""
        op = "Handler.SaveUserHandler"
        try:
            req = decode_json_body(request.get_data())
        except ValidationError as exc:
            self._log_error("error validation JSON", op, exc)
            return _plain_error(400, str(exc))

        try:
            validate_save_request(req)
        except ValidationError as exc:
            self._log_error("validation error", op, exc, request=asdict(req))
            return _error_response(400, str(exc))

        user = User(first_name=req.first_name, last_name=req.last_name, age=req.age)
        try:
            self.user_service.save_user(user)
        except Exception as exc:  # any service failure becomes a 500
            self._log_error("error saving user", op, exc)
            return _error_response(500, "couldnt save user")

        self.log.info("save user success")
        return _json_response(201, {"message": f"user {user.first_name} saved"})

    def get_user(self) -> Response:
        """GET /users/search: find users by name prefixes and age."""
        op = "Handler.GetUserHandler"
        failed = self._read_body(op)
        if failed is not None:
            return failed

        query = request.args
        params = GetUserParams(
            first_name=query.get("first_name", "").strip(),
            last_name=query.get("last_name", "").strip(),
        )
        age_text = query.get("age", "")
        if age_text:
            try:
                params.age = _parse_int(age_text, "Atoi")
            except ValueError as exc:
                self._log_error("error strconv", op, exc)
                return _error_response(400, "incorrect age")

        try:
            validate_get_user_params(params)
        except ValidationError as exc:
            self._log_error("invalid search parameters", op, exc, params=asdict(params))
            return _error_response(400, "validation error")

        if params.age is None:
            self._log_error("error getting user", op, None, reason="age is required")
            return _error_response(500, "couldnt get user")

        try:
            users = self.user_service.get_user(params.first_name, params.last_name, params.age)
        except Exception as exc:
            self._log_error("error getting user", op, exc)
            return _error_response(500, "couldnt get user")

        self.log.info("user is getting")
        return _json_response(200, {"answer": _users_payload(users)})

    def list_users(self) -> Response:
        """GET /users/list: list live users within age and date bounds."""
        op = "Handler.ListUsersHandler"
        failed = self._read_body(op)
        if failed is not None:
            return failed

        query = request.args
        parsed: dict[str, int] = {}
        for name, func in (
            ("min_age", "Atoi"),
            ("max_age", "Atoi"),
            ("start_date", "ParseInt"),
            ("end_date", "ParseInt"),
        ):
            text = query.get(name, "")
            if not text:
                continue
            try:
                parsed[name] = _parse_int(text, func)
            except ValueError as exc:
                self._log_error(f"invalid {name}", op, exc, value=text)
                return _error_response(400, str(exc))
        params = ListUsersParams(**parsed)

        try:
            validate_list_users_params(params)
        except ValidationError as exc:
            self._log_error("validation error", op, exc, params=asdict(params))
            return _error_response(400, str(exc))

        try:
            users = self.user_service.list_users(
                params.min_age, params.max_age, params.start_date, params.end_date
            )
        except Exception as exc:
            self._log_error("error listing users", op, exc)
            return _error_response(500, "couldnt list users")

        return _json_response(200, {"users": _users_payload(users)})

    def delete_user(self, user_id: str) -> Response:
        """DELETE /users/<id>: remove a user permanently."""
        op = "Handler.DeleteUserHandler"
        try:
            parsed = uuid.UUID(user_id)
        except ValueError as exc:
            self._log_error("error parsing id", op, exc, value=user_id)
            return _error_response(400, "некорректный id")

        try:
            self.user_service.user_delete(User(id=parsed))
        except Exception as exc:
            self._log_error("error deleting user", op, exc)
            return _error_response(500, "ошибка удаления пользователя")

        self.log.info("User deleted")
        return _json_response(200, {"message": "User deleted"})

    def soft_delete_user(self, user_id: str) -> Response:
        """DELETE /users/<id>/soft: mark a user as deleted."""
        op = "Handler.SoftDeleteUserHandler"
        try:
            parsed = uuid.UUID(user_id)
        except ValueError:
            self._log_error("Invalid user id format", op)
            return _error_response(400, "invalid user id format")

        try:
            self.user_service.soft_user_delete(User(id=parsed))
        except Exception as exc:
            self._log_error("Soft delete error", op, exc)
            return _error_response(500, "soft delete error")

        return _json_response(200, {"message": "User soft deleted"})

    def update_user(self, user_id: str) -> Response:
        """PATCH /users/<id>/update: replace a user's name and age."""
        op = "Handler.UpdateUser"
        try:
            parsed = uuid.UUID(user_id)
        except ValueError as exc:
            self._log_error("invalid user id", op, exc)
            return _error_response(400, "invalid user id")

        try:
            text = request.get_data().decode("utf-8")
            start = len(text) - len(text.lstrip(" \t\r\n"))
            data, _ = json.JSONDecoder().raw_decode(text, start)
            user = User.from_dict(data)
        except ValueError as exc:
            self._log_error("error decoding body", op, exc)
            return _error_response(400, "invalid request body")
        user.id = parsed

        try:
            self.user_service.user_update(user)
        except Exception as exc:
            self._log_error("error updating user", op, exc)
            return _error_response(500, "couldnt update user")

        return _json_response(200, user.to_dict())