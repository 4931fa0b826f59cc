"""Storage boundary consumed by the account and transaction services"""

import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from decimal import Decimal
from typing import Iterator, Optional

from banking_api.domain.models import Account, Transaction, TransactionType


class LedgerStore(ABC):
    """
    Persists accounts and transactions and answers point queries.

    "Today" means the calendar day of the store's clock in the store's
    timezone. Every method raises StorageFailure when the backend fails.
    """

    @abstractmethod
    def find_account_by_number(self, account_number: str) -> Optional[Account]:
        pass

    @abstractmethod
    def account_exists(self, account_number: str) -> bool:
        pass

    @abstractmethod
    def create_account(self, name: str, account_number: str) -> Account:
        """Create a zero-balance account; raises DuplicateAccountError if the number is taken"""
        pass

    @abstractmethod
    def count_transactions_today(self, account_id: uuid.UUID, transaction_type: TransactionType) -> int:
        pass

    @abstractmethod
    def sum_transaction_amounts_today(self, account_id: uuid.UUID, transaction_type: TransactionType) -> Decimal:
        """Sum of today's committed amounts of this type; Decimal(0) when none"""
        pass

    @abstractmethod
    def commit_transaction(self, account: Account, transaction_type: TransactionType, amount: Decimal) -> Transaction:
        """
        Atomically insert the transaction and apply it to the account balance.

        Either both writes become visible or neither does.
        """
        pass

    @contextmanager
    def account_guard(self, account_number: str) -> Iterator[None]:
        """
        Scope in which every call on this store for the account is serialized
        against other processes sharing the backend.

        Stores whose state lives in one process need nothing beyond the
        caller's in-process lock, so the default does nothing.
        """
        yield
