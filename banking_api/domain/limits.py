"""Per-type transaction limits, loaded once at startup"""

from dataclasses import dataclass
from typing import Dict

from banking_api.config import Settings
from banking_api.domain.exceptions import InvalidLimitPolicyError
from banking_api.domain.models import TransactionType


@dataclass(frozen=True)
class TypeLimits:
    """Thresholds for one transaction type"""

    max_per_transaction: int
    max_daily_count: int
    max_daily_amount: int

    def __post_init__(self) -> None:
        for name in ("max_per_transaction", "max_daily_count", "max_daily_amount"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise InvalidLimitPolicyError(f"{name} must be a positive integer, got {value!r}")


class LimitPolicy:
    """
    The six configured thresholds: one TypeLimits triple per transaction type.

    The daily amount cap is exclusive: a transaction that would bring the day's
    total to exactly max_daily_amount is already rejected by the processor.
    """

    def __init__(self, deposit: TypeLimits, withdrawal: TypeLimits):
        self._limits: Dict[TransactionType, TypeLimits] = {
            TransactionType.DEPOSIT: deposit,
            TransactionType.WITHDRAWAL: withdrawal,
        }

    @property
    def deposit(self) -> TypeLimits:
        return self._limits[TransactionType.DEPOSIT]

    @property
    def withdrawal(self) -> TypeLimits:
        return self._limits[TransactionType.WITHDRAWAL]

    def for_type(self, transaction_type: TransactionType) -> TypeLimits:
        return self._limits[transaction_type]

    @classmethod
    def from_settings(cls, settings: Settings) -> "LimitPolicy":
        return cls(
            deposit=TypeLimits(
                max_per_transaction=settings.deposit_max_per_transaction,
                max_daily_count=settings.deposit_max_daily_count,
                max_daily_amount=settings.deposit_max_daily_amount,
            ),
            withdrawal=TypeLimits(
                max_per_transaction=settings.withdrawal_max_per_transaction,
                max_daily_count=settings.withdrawal_max_daily_count,
                max_daily_amount=settings.withdrawal_max_daily_amount,
            ),
        )

    def __repr__(self) -> str:
        return f"LimitPolicy(deposit={self.deposit!r}, withdrawal={self.withdrawal!r})"
