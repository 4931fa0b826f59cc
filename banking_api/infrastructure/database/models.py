"""SQLAlchemy ORM models for accounts and their transactions"""

import uuid
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Numeric, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

# Balances and amounts: 19 digits, 2 after the point
MONEY = Numeric(19, 2, asdecimal=True)


class AccountRecord(Base):
    """Customer account; balance only changes together with a new transaction row"""

    __tablename__ = "accounts"
    __table_args__ = (CheckConstraint("balance >= 0", name="ck_accounts_balance_non_negative"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    account_number = Column(Text, nullable=False, unique=True, index=True)
    balance = Column(MONEY, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    transactions = relationship("TransactionRecord", back_populates="account")


class TransactionRecord(Base):
    """Committed deposit or withdrawal; rows are never updated or deleted"""

    __tablename__ = "transactions"
    __table_args__ = (CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    account_id = Column(UUID(as_uuid=True), ForeignKey("accounts.id"), nullable=False, index=True)
    type = Column(Text, nullable=False)
    amount = Column(MONEY, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)

    account = relationship("AccountRecord", back_populates="transactions")
