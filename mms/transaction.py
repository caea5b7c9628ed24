"""Transaction entity, repository contract and domain service."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional, Protocol


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


_VALID_TYPES = tuple(member.value for member in TransactionType)


@dataclass
class Transaction:
    id: int = 0
    user_id: int = 0
    amount: float = 0.0
    description: str = ""
    type: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Repository(Protocol):
    """Storage for transactions."""

    def create(self, t: Transaction) -> None: ...

    def find_by_id(self, id: int) -> Transaction: ...

    def find_by_user_id(self, user_id: int) -> List[Transaction]: ...

    def update(self, t: Transaction) -> None: ...

    def delete(self, id: int) -> None: ...


class TransactionError(Exception):
    """Base class for transaction errors."""


class TransactionNotFoundError(TransactionError, LookupError):
    def __init__(self, message: str = "transaction not found"):
        super().__init__(message)


class InvalidAmountError(TransactionError, ValueError):
    def __init__(self, message: str = "amount must be greater than 0"):
        super().__init__(message)


class InvalidTypeError(TransactionError, ValueError):
    def __init__(self, message: str = "transaction type must be 'income' or 'expense'"):
        super().__init__(message)


def _validate(t: Transaction) -> None:
    if t.amount <= 0:
        raise InvalidAmountError()
    if t.type not in _VALID_TYPES:
        raise InvalidTypeError()


class Service:
    """Validates transactions and stamps times before storing them."""

    def __init__(self, repo: Repository):
        self._repo = repo

    def create(self, t: Transaction) -> None:
        _validate(t)
        if t.user_id <= 0:
            raise TransactionError("user ID is required")
        now = datetime.now()
        t.created_at = now
        t.updated_at = now
        self._repo.create(t)

    def get_by_id(self, id: int) -> Transaction:
        return self._repo.find_by_id(id)

    def get_by_user_id(self, user_id: int) -> List[Transaction]:
        return self._repo.find_by_user_id(user_id)

    def update(self, t: Transaction) -> None:
        _validate(t)
        t.updated_at = datetime.now()
        self._repo.update(t)

    def delete(self, id: int) -> None:
        self._repo.delete(id)