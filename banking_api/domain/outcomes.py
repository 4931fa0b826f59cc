"""Failure outcomes returned (not raised) by the account and transaction services"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from banking_api.domain.models import Account, Transaction, TransactionType


@dataclass(frozen=True)
class Failure:
    """Base for every structured failure; carries a human-readable reason"""

    message: str


@dataclass(frozen=True)
class AccountNotFound(Failure):
    """No account exists with the requested number"""

    message: str = "Account not found"


@dataclass(frozen=True)
class Conflict(Failure):
    """Account number is already taken"""

    message: str = "Account already exists"


@dataclass(frozen=True)
class RejectedTransaction(Failure):
    """Request was well-formed but violates a limit or the balance; never transient"""

    pass


@dataclass(frozen=True)
class TransactionLimitExceeded(RejectedTransaction):
    @classmethod
    def for_type(cls, transaction_type: TransactionType) -> "TransactionLimitExceeded":
        noun = "deposit" if transaction_type == TransactionType.DEPOSIT else "withdrawal"
        return cls(f"You have exceeded the maximum {noun} amount.")


@dataclass(frozen=True)
class DailyFrequencyExceeded(RejectedTransaction):
    message: str = "You have reached the maximum number of transactions for today."


@dataclass(frozen=True)
class DailyAmountExceeded(RejectedTransaction):
    @classmethod
    def for_type(cls, transaction_type: TransactionType) -> "DailyAmountExceeded":
        noun = "deposit" if transaction_type == TransactionType.DEPOSIT else "withdrawal"
        return cls(f"You have exceeded the maximum daily {noun} limit")


@dataclass(frozen=True)
class InsufficientBalance(RejectedTransaction):
    message: str = "Insufficient balance."


ProcessResult = Union[Transaction, Failure]
CreateAccountResult = Union[Account, Conflict]
BalanceResult = Union[Decimal, AccountNotFound]
