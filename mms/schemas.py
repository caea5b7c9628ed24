"""Validated request bodies for the authentication endpoints."""

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

_EMAIL = re.compile(
    r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@"
    r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)*$"
)

REQUIRED, EMAIL, MIN = "required", "email", "min"

_RULES = {
    REQUIRED: lambda v: v != "",
    EMAIL: lambda v: _EMAIL.match(v) is not None,
    MIN: lambda v: len(v) >= 6,
}

_REGISTER_RULES = dict(name=(REQUIRED,), email=(REQUIRED, EMAIL), password=(REQUIRED, MIN))
_LOGIN_RULES = dict(email=(REQUIRED, EMAIL), password=(REQUIRED,))


@dataclass(frozen=True)
class FieldError:
    """One failed rule on one field."""

    struct: str
    field: str
    tag: str

    def __str__(self) -> str:
        return (
            f"Key: '{self.struct}.{self.field}' Error:Field validation for "
            f"'{self.field}' failed on the '{self.tag}' tag"
        )


class RequestValidationError(ValueError):
    """Raised when a request body is malformed or breaks a field rule."""

    def __init__(self, message: str, errors: Iterable[FieldError] = ()):
        super().__init__(message)
        self.errors = list(errors)


@dataclass(frozen=True)
class RegisterRequest:
    name: str
    email: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class LoginRequest:
    email: str
    password: str = field(repr=False)


def _validate(struct: str, data: Any, rules: dict) -> dict:
    if not isinstance(data, Mapping):
        raise RequestValidationError("invalid request body: expected a JSON object")
    values, errors = {}, []
    for key, tags in rules.items():
        value = data.get(key)
        value = "" if value is None else value
        if not isinstance(value, str):
            raise RequestValidationError(f"invalid request body: field {key!r} must be a string")
        values[key] = value
        failed = next((tag for tag in tags if not _RULES[tag](value)), None)
        if failed:
            errors.append(FieldError(struct, key.capitalize(), failed))
    if errors:
        raise RequestValidationError("\n".join(map(str, errors)), errors)
    return values


def parse_register_request(data) -> RegisterRequest:
    """Validate a decoded JSON body for registration."""
    return RegisterRequest(**_validate("RegisterRequest", data, _REGISTER_RULES))


def parse_login_request(data) -> LoginRequest:
    """Validate a decoded JSON body for login."""
    return LoginRequest(**_validate("LoginRequest", data, _LOGIN_RULES))