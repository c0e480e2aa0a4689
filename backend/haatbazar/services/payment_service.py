"""
haatbazar/services/payment_service.py - Payment transaction records.

Only bookkeeping lives here: a transaction is recorded as `pending` when the client starts
a payment and its status is later overwritten by the provider callback. Talking to the
payment providers themselves is outside this service.
"""
import logging
from typing import Any, Dict

from haatbazar.core.errors import InvalidStatus, TransactionNotFound, unexpected_as_internal
from haatbazar.repositories.transactions import TransactionRepository
from haatbazar.schemas.transaction import TERMINAL_STATUSES, TRANSACTION_STATUSES, TransactionCreate

logger = logging.getLogger("haatbazar.payments")


class PaymentService:
    def __init__(self, transactions: TransactionRepository):
        self.transactions = transactions

    def record(self, payload: TransactionCreate) -> Dict[str, Any]:
        with unexpected_as_internal("record_transaction"):
            doc = self.transactions.create(payload.model_dump())
        logger.info("Transaction %s recorded for order %s (%s)", doc["id"], payload.order_id, payload.payment_method)
        return doc

    def get(self, transaction_id: str) -> Dict[str, Any]:
        with unexpected_as_internal("get_transaction"):
            doc = self.transactions.get(transaction_id)
        if not doc:
            raise TransactionNotFound()
        return doc

    def update_status(self, transaction_id: str, status: str) -> Dict[str, Any]:
        if status not in TRANSACTION_STATUSES:
            raise InvalidStatus(f"Transaction status must be one of {', '.join(TRANSACTION_STATUSES)}")
        with unexpected_as_internal("update_transaction_status"):
            result = self.transactions.set_status(transaction_id, status)
        if result is None:
            raise TransactionNotFound()
        before = result["before"].get("status")
        if before in TERMINAL_STATUSES and before != status:
            logger.warning("Transaction %s overwritten from terminal status %s to %s", transaction_id, before, status)
        else:
            logger.info("Transaction %s: %s -> %s", transaction_id, before, status)
        return result["after"]
