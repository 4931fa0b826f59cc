"""Domain models - pure Python dataclasses representing business entities"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class TransactionType(str, Enum):
    """Direction of a balance movement"""

    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"


@dataclass
class Account:
    """Customer account as seen by the core"""

    id: uuid.UUID
    name: str
    account_number: str
    balance: Decimal
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Committed deposit or withdrawal, immutable once created"""

    id: uuid.UUID
    account_id: uuid.UUID
    account_number: str
    type: TransactionType
    amount: Decimal
    created_at: datetime
