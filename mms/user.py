"""User entity, repository contract and domain service."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Protocol


@dataclass
class User:
    id: int = 0
    name: str = ""
    email: str = ""
    password: str = field(default="", repr=False)
    created_at: Optional[datetime] = None


class Repository(Protocol):
    """Storage for users. Lookups of missing users raise LookupError."""

    def create(self, u: User) -> None: ...

    def find_by_email(self, email: str) -> User: ...

    def find_by_id(self, id: int) -> User: ...


class UserNotFoundError(LookupError):
    def __init__(self, message: str = "user not found"):
        super().__init__(message)


class InvalidCredentialsError(Exception):
    def __init__(self, message: str = "invalid credentials"):
        super().__init__(message)


class Service:
    """Registers users and looks them up for authentication."""

    def __init__(self, repo: Repository):
        self._repo = repo

    def register(self, u: User) -> None:
        if u.created_at is None:
            u.created_at = datetime.now()
        self._repo.create(u)

    def authenticate(self, email: str, password: str) -> User:
        """Return the user with this e-mail; the password is checked by the caller."""
        try:
            u = self._repo.find_by_email(email)
        except LookupError as exc:
            raise InvalidCredentialsError() from exc
        if u is None:
            raise InvalidCredentialsError()
        return u