"""Account creation and balance lookup"""

from banking_api.domain.exceptions import DuplicateAccountError
from banking_api.domain.ledger_store import LedgerStore
from banking_api.domain.outcomes import AccountNotFound, BalanceResult, Conflict, CreateAccountResult
from banking_api.infrastructure.observability.logging import log_account_created
from banking_api.infrastructure.observability.metrics import record_account_created


class AccountService:
    """Opens accounts and reports balances; balances only change through TransactionProcessor"""

    def __init__(self, store: LedgerStore):
        self.store = store

    def create_account(self, name: str, account_number: str) -> CreateAccountResult:
        """Create a zero-balance account, or Conflict if the number is already taken"""
        if self.store.account_exists(account_number):
            result: CreateAccountResult = Conflict()
        else:
            try:
                result = self.store.create_account(name, account_number)
            except DuplicateAccountError:
                # Lost a race with a concurrent create of the same number
                result = Conflict()

        created = not isinstance(result, Conflict)
        record_account_created(created)
        log_account_created(account_number, created)
        return result

    def get_balance(self, account_number: str) -> BalanceResult:
        account = self.store.find_account_by_number(account_number)
        if account is None:
            return AccountNotFound()
        return account.balance
