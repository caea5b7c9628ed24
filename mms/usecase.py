"""Application use cases for transactions, with request-level logging."""

from typing import List

from mms import logger
from mms.transaction import Service, Transaction


class TransactionUsecase:
    """Creates, reads, updates and deletes transactions through the domain service."""

    def __init__(self, tx_service: Service):
        self._service = tx_service
        logger.get().debug("TransactionUsecase: initialized")

    def create_transaction(
        self, user_id: int, amount: float, description: str, tx_type: str
    ) -> Transaction:
        log = logger.get()
        fields = {"user_id": user_id, "amount": amount, "type": tx_type}
        log.info(
            "TransactionUsecase.CreateTransaction: creating transaction",
            extra={"fields": fields},
        )
        t = Transaction(user_id=user_id, amount=amount, description=description, type=tx_type)
        try:
            self._service.create(t)
        except Exception as exc:
            log.error(
                "TransactionUsecase.CreateTransaction: failed to create transaction",
                extra={"fields": {"error": str(exc), **fields}},
            )
            raise
        log.info(
            "TransactionUsecase.CreateTransaction: transaction created successfully",
            extra={"fields": {"transaction_id": t.id, **fields}},
        )
        return t

    def get_transaction_by_id(self, id: int) -> Transaction:
        log = logger.get()
        log.info(
            "TransactionUsecase.GetTransactionByID: fetching transaction",
            extra={"fields": {"transaction_id": id}},
        )
        try:
            t = self._service.get_by_id(id)
        except Exception as exc:
            log.error(
                "TransactionUsecase.GetTransactionByID: failed to fetch transaction",
                extra={"fields": {"error": str(exc), "transaction_id": id}},
            )
            raise
        log.info(
            "TransactionUsecase.GetTransactionByID: transaction fetched successfully",
            extra={"fields": {"transaction_id": id}},
        )
        return t

    def get_user_transactions(self, user_id: int) -> List[Transaction]:
        log = logger.get()
        log.info(
            "TransactionUsecase.GetUserTransactions: fetching user transactions",
            extra={"fields": {"user_id": user_id}},
        )
        try:
            transactions = self._service.get_by_user_id(user_id)
        except Exception as exc:
            log.error(
                "TransactionUsecase.GetUserTransactions: failed to fetch user transactions",
                extra={"fields": {"error": str(exc), "user_id": user_id}},
            )
            raise
        log.info(
            "TransactionUsecase.GetUserTransactions: transactions fetched successfully",
            extra={"fields": {"user_id": user_id, "count": len(transactions)}},
        )
        return transactions

    def update_transaction(
        self, id: int, amount: float, description: str, tx_type: str
    ) -> Transaction:
        log = logger.get()
        log.info(
            "TransactionUsecase.UpdateTransaction: updating transaction",
            extra={"fields": {"transaction_id": id, "amount": amount, "type": tx_type}},
        )
        t = Transaction(id=id, amount=amount, description=description, type=tx_type)
        try:
            self._service.update(t)
        except Exception as exc:
            log.error(
                "TransactionUsecase.UpdateTransaction: failed to update transaction",
                extra={"fields": {"error": str(exc), "transaction_id": id}},
            )
            raise
        log.info(
            "TransactionUsecase.UpdateTransaction: transaction updated successfully",
            extra={"fields": {"transaction_id": id}},
        )
        return t

    def delete_transaction(self, id: int) -> None:
        log = logger.get()
        log.info(
            "TransactionUsecase.DeleteTransaction: deleting transaction",
            extra={"fields": {"transaction_id": id}},
        )
        try:
            self._service.delete(id)
        except Exception as exc:
            log.error(
                "TransactionUsecase.DeleteTransaction: failed to delete transaction",
                extra={"fields": {"error": str(exc), "transaction_id": id}},
            )
            raise
        log.info(
            "TransactionUsecase.DeleteTransaction: transaction deleted successfully",
            extra={"fields": {"transaction_id": id}},
        )