"""Data access layer: SQLAlchemy implementation of the ledger store"""

import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, tzinfo
from decimal import Decimal
from typing import Callable, Iterator, Optional
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from banking_api.infrastructure.database.models import AccountRecord, TransactionRecord
from banking_api.domain.exceptions import DuplicateAccountError, StorageFailure
from banking_api.domain.ledger_store import LedgerStore
from banking_api.domain.models import Account, Transaction, TransactionType
from banking_api.utils.date_utils import day_window, ensure_utc, resolve_timezone, utc_now


def _to_account(record: AccountRecord) -> Account:
    return Account(
        id=record.id,
        name=record.name,
        account_number=record.account_number,
        balance=Decimal(record.balance),
        created_at=ensure_utc(record.created_at),
        updated_at=ensure_utc(record.updated_at),
    )


def _to_transaction(record: TransactionRecord, account_number: str) -> Transaction:
    return Transaction(
        id=record.id,
        account_id=record.account_id,
        account_number=account_number,
        type=TransactionType(record.type),
        amount=Decimal(record.amount),
        created_at=ensure_utc(record.created_at),
    )


class SqlLedgerStore(LedgerStore):
    """
    Ledger store backed by a relational database.

    Outside an account guard each operation runs in its own session. Inside
    one, every operation on the calling thread joins the guard's database
    transaction, which holds the account row locked until it commits.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        clock: Callable[[], datetime] = utc_now,
        timezone_name: str = "UTC",
    ):
        self.session_factory = session_factory
        self._clock = clock
        self._tz: tzinfo = resolve_timezone(timezone_name)
        self._local = threading.local()

    @contextmanager
    def account_guard(self, account_number: str) -> Iterator[None]:
        """
        Lock the account row (SELECT ... FOR UPDATE) for the whole block.

        Daily aggregates, balance check and commit then all see one
        consistent state, even across worker processes. The block commits on
        normal exit and rolls back if it raises.
        """
        if getattr(self._local, "db", None) is not None:
            raise RuntimeError("account_guard is not re-entrant")

        try:
            with self.session_factory.begin() as db:
                db.execute(
                    select(AccountRecord.id)
                    .where(AccountRecord.account_number == account_number)
                    .with_for_update()
                )
                self._local.db = db
                try:
                    yield
                finally:
                    self._local.db = None
        except SQLAlchemyError as e:
            raise StorageFailure(f"Account guard failed: {e}") from e

    @contextmanager
    def _session(self, write: bool = False) -> Iterator[Session]:
        guarded = getattr(self._local, "db", None)
        if guarded is not None:
            yield guarded
        elif write:
            with self.session_factory.begin() as db:
                yield db
        else:
            with self.session_factory() as db:
                yield db

    def find_account_by_number(self, account_number: str) -> Optional[Account]:
        try:
            with self._session() as db:
                record = self._account_by_number(db, account_number)
                return _to_account(record) if record else None
        except SQLAlchemyError as e:
            raise StorageFailure(f"Account lookup failed: {e}") from e

    def account_exists(self, account_number: str) -> bool:
        try:
            with self._session() as db:
                return self._account_by_number(db, account_number) is not None
        except SQLAlchemyError as e:
            raise StorageFailure(f"Account lookup failed: {e}") from e

    def create_account(self, name: str, account_number: str) -> Account:
        now = self._clock()
        try:
            with self._session(write=True) as db:
                record = AccountRecord(
                    name=name,
                    account_number=account_number,
                    balance=Decimal("0"),
                    created_at=now,
                    updated_at=now,
                )
                db.add(record)
                db.flush()  # Get ID and hit the unique constraint before committing
                return _to_account(record)
        except IntegrityError as e:
            raise DuplicateAccountError(account_number) from e
        except SQLAlchemyError as e:
            raise StorageFailure(f"Account creation failed: {e}") from e

    def count_transactions_today(self, account_id: uuid.UUID, transaction_type: TransactionType) -> int:
        query = select(func.count(TransactionRecord.id))
        try:
            with self._session() as db:
                return int(db.execute(self._today(query, account_id, transaction_type)).scalar_one())
        except SQLAlchemyError as e:
            raise StorageFailure(f"Daily count query failed: {e}") from e

    def sum_transaction_amounts_today(self, account_id: uuid.UUID, transaction_type: TransactionType) -> Decimal:
        query = select(func.coalesce(func.sum(TransactionRecord.amount), 0))
        try:
            with self._session() as db:
                total = db.execute(self._today(query, account_id, transaction_type)).scalar_one()
                return Decimal(str(total))
        except SQLAlchemyError as e:
            raise StorageFailure(f"Daily sum query failed: {e}") from e

    def commit_transaction(self, account: Account, transaction_type: TransactionType, amount: Decimal) -> Transaction:
        """
        Insert the transaction row and move the balance in one database transaction.

        The account row is re-read with SELECT ... FOR UPDATE so the balance is
        current even if another process touched it. Any failure rolls back both
        writes.
        """
        now = self._clock()
        try:
            with self._session(write=True) as db:
                record = db.get(AccountRecord, account.id, with_for_update=True, populate_existing=True)
                if record is None:
                    raise StorageFailure(f"Account {account.account_number} vanished before commit")

                delta = amount if transaction_type == TransactionType.DEPOSIT else -amount
                new_balance = Decimal(record.balance) + delta
                if new_balance < 0:
                    raise StorageFailure(f"Commit would overdraw account {account.account_number}")

                txn = TransactionRecord(
                    account_id=record.id,
                    type=transaction_type.value,
                    amount=amount,
                    created_at=now,
                )
                db.add(txn)
                record.balance = new_balance
                record.updated_at = now
                db.flush()
                return _to_transaction(txn, record.account_number)
        except SQLAlchemyError as e:
            raise StorageFailure(f"Transaction commit failed: {e}") from e

    @staticmethod
    def _account_by_number(db: Session, account_number: str) -> Optional[AccountRecord]:
        return db.execute(
            select(AccountRecord).where(AccountRecord.account_number == account_number)
        ).scalar_one_or_none()

    def _today(self, query, account_id: uuid.UUID, transaction_type: TransactionType):
        start, end = day_window(self._clock(), self._tz)
        return query.where(
            TransactionRecord.account_id == account_id,
            TransactionRecord.type == transaction_type.value,
            TransactionRecord.created_at >= start,
            TransactionRecord.created_at < end,
        )
