"""Transaction processor - core business logic for deposits and withdrawals"""

import time
from decimal import Decimal
from typing import Optional

from banking_api.domain.ledger_store import LedgerStore
from banking_api.domain.limits import LimitPolicy
from banking_api.domain.locking import AccountLocks
from banking_api.domain.models import Account, Transaction, TransactionType
from banking_api.domain.outcomes import (
    AccountNotFound,
    DailyAmountExceeded,
    DailyFrequencyExceeded,
    InsufficientBalance,
    ProcessResult,
    RejectedTransaction,
    TransactionLimitExceeded,
)
from banking_api.infrastructure.observability.logging import log_transaction_outcome
from banking_api.infrastructure.observability.metrics import record_transaction

_OUTCOME_LABELS = {
    AccountNotFound: "account_not_found",
    TransactionLimitExceeded: "transaction_limit",
    DailyFrequencyExceeded: "daily_frequency",
    DailyAmountExceeded: "daily_amount",
    InsufficientBalance: "insufficient_balance",
}


class TransactionProcessor:
    """Validates deposits and withdrawals against the limit policy and commits them"""

    def __init__(self, store: LedgerStore, limits: LimitPolicy, locks: AccountLocks | None = None):
        self.store = store
        self.limits = limits
        self.locks = locks or AccountLocks()

    def deposit(self, account_number: str, amount: int) -> ProcessResult:
        return self.process(account_number, TransactionType.DEPOSIT, amount)

    def withdraw(self, account_number: str, amount: int) -> ProcessResult:
        return self.process(account_number, TransactionType.WITHDRAWAL, amount)

    def process(self, account_number: str, transaction_type: TransactionType, amount: int) -> ProcessResult:
        """
        Apply one deposit or withdrawal.

        Checks run in a fixed order and the first failure wins:
        1. Account must exist
        2. Amount within the per-transaction cap
        3. Fewer than max_daily_count transactions of this type today
        4. Today's total plus this amount stays strictly below max_daily_amount
        5. Withdrawals only: balance covers the amount

        The whole sequence holds the account's lock and runs inside the
        store's account guard, so two requests on the same account can never
        both validate against stale totals or balance, whether they share a
        process or not. A failing check writes nothing.

        Raises:
            ValueError: amount is not positive (callers validate this first)
            StorageFailure: the ledger store failed; never retried here
        """
        if amount <= 0:
            raise ValueError(f"amount must be positive, got {amount}")

        start_time = time.time()

        with self.locks.hold(account_number), self.store.account_guard(account_number):
            account = self.store.find_account_by_number(account_number)
            if account is None:
                result: ProcessResult = AccountNotFound()
            else:
                failure = self._validate(account, transaction_type, amount)
                result = failure or self.store.commit_transaction(account, transaction_type, Decimal(amount))

        self._report(account_number, transaction_type, amount, result, (time.time() - start_time) * 1000)
        return result

    def _validate(
        self,
        account: Account,
        transaction_type: TransactionType,
        amount: int,
    ) -> Optional[RejectedTransaction]:
        limits = self.limits.for_type(transaction_type)

        if amount > limits.max_per_transaction:
            return TransactionLimitExceeded.for_type(transaction_type)

        count_today = self.store.count_transactions_today(account.id, transaction_type)
        if count_today >= limits.max_daily_count:
            return DailyFrequencyExceeded()

        # Reaching the cap exactly is already a violation
        projected = self.store.sum_transaction_amounts_today(account.id, transaction_type) + amount
        if projected >= limits.max_daily_amount:
            return DailyAmountExceeded.for_type(transaction_type)

        if transaction_type == TransactionType.WITHDRAWAL and account.balance < amount:
            return InsufficientBalance()

        return None

    @staticmethod
    def _report(
        account_number: str,
        transaction_type: TransactionType,
        amount: int,
        result: ProcessResult,
        duration_ms: float,
    ) -> None:
        if isinstance(result, Transaction):
            outcome, reason = "committed", None
        else:
            outcome, reason = _OUTCOME_LABELS.get(type(result), "rejected"), result.message

        record_transaction(transaction_type.value, outcome, amount)
        log_transaction_outcome(account_number, transaction_type.value, amount, outcome, duration_ms, reason)
