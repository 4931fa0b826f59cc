"""In-memory ledger store used by unit tests and local experiments"""

import threading
import uuid
from dataclasses import replace
from datetime import datetime, tzinfo
from decimal import Decimal
from typing import Callable, Dict, List, Optional

from banking_api.domain.exceptions import DuplicateAccountError, StorageFailure
from banking_api.domain.ledger_store import LedgerStore
from banking_api.domain.models import Account, Transaction, TransactionType
from banking_api.utils.date_utils import day_window, resolve_timezone, utc_now


class InMemoryLedgerStore(LedgerStore):
    """Thread-safe dictionary-backed store; callers receive copies, never live records"""

    def __init__(self, clock: Callable[[], datetime] = utc_now, timezone_name: str = "UTC"):
        self._clock = clock
        self._tz: tzinfo = resolve_timezone(timezone_name)
        self._lock = threading.RLock()
        self._accounts: Dict[str, Account] = {}
        self._transactions: List[Transaction] = []

    def find_account_by_number(self, account_number: str) -> Optional[Account]:
        with self._lock:
            account = self._accounts.get(account_number)
            return replace(account) if account else None

    def account_exists(self, account_number: str) -> bool:
        with self._lock:
            return account_number in self._accounts

    def create_account(self, name: str, account_number: str) -> Account:
        with self._lock:
            if account_number in self._accounts:
                raise DuplicateAccountError(account_number)
            now = self._clock()
            account = Account(
                id=uuid.uuid4(),
                name=name,
                account_number=account_number,
                balance=Decimal("0"),
                created_at=now,
                updated_at=now,
            )
            self._accounts[account_number] = account
            return replace(account)

    def count_transactions_today(self, account_id: uuid.UUID, transaction_type: TransactionType) -> int:
        with self._lock:
            return len(self._today(account_id, transaction_type))

    def sum_transaction_amounts_today(self, account_id: uuid.UUID, transaction_type: TransactionType) -> Decimal:
        with self._lock:
            return sum((t.amount for t in self._today(account_id, transaction_type)), Decimal("0"))

    def commit_transaction(self, account: Account, transaction_type: TransactionType, amount: Decimal) -> Transaction:
        with self._lock:
            stored = self._accounts.get(account.account_number)
            if stored is None or stored.id != account.id:
                raise StorageFailure(f"Account {account.account_number} vanished before commit")

            delta = amount if transaction_type == TransactionType.DEPOSIT else -amount
            new_balance = stored.balance + delta
            if new_balance < 0:
                raise StorageFailure(f"Commit would overdraw account {account.account_number}")

            now = self._clock()
            transaction = Transaction(
                id=uuid.uuid4(),
                account_id=stored.id,
                account_number=stored.account_number,
                type=transaction_type,
                amount=amount,
                created_at=now,
            )
            # Both writes happen under the same lock, so readers see neither or both
            self._transactions.append(transaction)
            stored.balance = new_balance
            stored.updated_at = now
            return transaction

    def transactions_for(self, account_number: str) -> List[Transaction]:
        """Every committed transaction for an account, oldest first"""
        with self._lock:
            return [t for t in self._transactions if t.account_number == account_number]

    def _today(self, account_id: uuid.UUID, transaction_type: TransactionType) -> List[Transaction]:
        start, end = day_window(self._clock(), self._tz)
        return [
            t for t in self._transactions
            if t.account_id == account_id and t.type == transaction_type and start <= t.created_at < end
        ]
