from datetime import datetime

import pytest

from mms.transaction import (
    InvalidAmountError,
    InvalidTypeError,
    Service,
    Transaction,
    TransactionError,
    TransactionNotFoundError,
    TransactionType,
)


class FakeRepo:
    def __init__(self):
        self.rows = {}
        self.next_id = 1
        self.calls = []

    def create(self, t):
        self.calls.append(("create", t))
        t.id = self.next_id
        self.next_id += 1
        self.rows[t.id] = t

    def find_by_id(self, id):
        try:
            return self.rows[id]
        except KeyError:
            raise TransactionNotFoundError() from None

    def find_by_user_id(self, user_id):
        return [t for t in self.rows.values() if t.user_id == user_id]

    def update(self, t):
        self.calls.append(("update", t))
        self.rows[t.id] = t

    def delete(self, id):
        self.calls.append(("delete", id))
        self.rows.pop(id, None)


@pytest.fixture
def repo():
    return FakeRepo()


@pytest.fixture
def service(repo):
    return Service(repo)


def test_create_stamps_times_and_stores(service, repo):
    before = datetime.now()
    t = Transaction(user_id=3, amount=12.5, description="salary", type="income")
    service.create(t)
    assert t.id == 1
    assert repo.rows[1] is t
    assert t.created_at == t.updated_at
    assert before <= t.created_at <= datetime.now()


def test_create_accepts_enum_member(service, repo):
    t = Transaction(user_id=3, amount=4.0, type=TransactionType.EXPENSE)
    service.create(t)
    assert repo.rows[t.id].type == "expense"


@pytest.mark.parametrize("amount", [0, -1.5])
def test_create_rejects_non_positive_amount(service, repo, amount):
    t = Transaction(user_id=3, amount=amount, type="income")
    with pytest.raises(InvalidAmountError) as info:
        service.create(t)
    assert str(info.value) == "amount must be greater than 0"
    assert repo.calls == []


@pytest.mark.parametrize("tx_type", ["", "transfer", "Income"])
def test_create_rejects_unknown_type(service, repo, tx_type):
    t = Transaction(user_id=3, amount=10.0, type=tx_type)
    with pytest.raises(InvalidTypeError) as info:
        service.create(t)
    assert str(info.value) == "transaction type must be 'income' or 'expense'"
    assert repo.calls == []


def test_create_requires_user_id(service, repo):
    t = Transaction(user_id=0, amount=10.0, type="income")
    with pytest.raises(TransactionError) as info:
        service.create(t)
    assert str(info.value) == "user ID is required"
    assert t.created_at is None


def test_amount_checked_before_type(service):
    with pytest.raises(InvalidAmountError):
        service.create(Transaction(user_id=1, amount=0, type="bad"))


def test_update_stamps_only_updated_at(service, repo):
    t = Transaction(id=5, amount=8.0, description="food", type="expense")
    service.update(t)
    assert t.created_at is None
    assert t.updated_at is not None and t.updated_at <= datetime.now()
    assert repo.calls == [("update", t)]


def test_update_validates(service, repo):
    with pytest.raises(InvalidAmountError):
        service.update(Transaction(id=5, amount=-2, type="expense"))
    with pytest.raises(InvalidTypeError):
        service.update(Transaction(id=5, amount=2, type="gift"))
    assert repo.calls == []


def test_get_by_id_and_not_found(service):
    t = Transaction(user_id=2, amount=1.0, type="income")
    service.create(t)
    assert service.get_by_id(t.id) is t
    with pytest.raises(TransactionNotFoundError) as info:
        service.get_by_id(999)
    assert str(info.value) == "transaction not found"


def test_get_by_user_id_filters(service):
    mine = Transaction(user_id=2, amount=1.0, type="income")
    other = Transaction(user_id=4, amount=1.0, type="income")
    service.create(mine)
    service.create(other)
    assert service.get_by_user_id(2) == [mine]


def test_delete_delegates(service, repo):
    t = Transaction(user_id=2, amount=1.0, type="income")
    service.create(t)
    service.delete(t.id)
    assert t.id not in repo.rows
    assert repo.calls[-1] == ("delete", t.id)