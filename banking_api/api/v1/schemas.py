"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Any, Optional
from banking_api.domain.models import Account, Transaction, TransactionType


class AccountCreateRequest(BaseModel):
    """Request body for POST /api/account"""

    name: str = Field(..., min_length=1, description="Account holder name")
    account_number: str = Field(..., min_length=1, description="Unique account number")


class TransactionRequest(BaseModel):
    """Request body for POST /api/account/deposit and /api/account/withdraw"""

    account_number: str = Field(..., min_length=1, description="Account to move funds on")
    amount: int = Field(..., gt=0, description="Amount to deposit or withdraw")


class AccountSchema(BaseModel):
    """Account as returned to clients"""

    id: str
    name: str
    account_number: str
    balance: Decimal
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, account: Account) -> "AccountSchema":
        return cls(
            id=str(account.id),
            name=account.name,
            account_number=account.account_number,
            balance=account.balance,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )


class TransactionSchema(BaseModel):
    """Committed transaction as returned to clients"""

    id: str
    account_number: str
    type: TransactionType
    amount: Decimal
    created_at: datetime

    @classmethod
    def from_domain(cls, transaction: Transaction) -> "TransactionSchema":
        return cls(
            id=str(transaction.id),
            account_number=transaction.account_number,
            type=transaction.type,
            amount=transaction.amount,
            created_at=transaction.created_at,
        )


class BalanceSchema(BaseModel):
    balance: Decimal


class ResponseWrapper(BaseModel):
    """Envelope shared by every account endpoint"""

    code: int
    message: str
    data: Optional[Any] = None
