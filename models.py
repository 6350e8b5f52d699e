# models.py
# Role: SQLAlchemy ORM models for the finance tracker domain.
#       Users own wallets, categories and transactions; every owned row
#       carries user_id so queries can be scoped to the caller.

from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from db import Base

WALLET_TYPES = ("cash", "bank", "ewallet")
CATEGORY_KINDS = ("income", "expense")
TRANSACTION_TYPES = ("income", "expense", "transfer")

# Bounds for minor-unit amounts and row ids. SQLite INTEGER is signed 64-bit;
# capping amounts well below it keeps SUM() over a journal from overflowing.
MAX_AMOUNT = 10**15
MAX_ID = 2**63 - 1


def utcnow() -> datetime:
    """Current time as naive UTC (SQLite stores no offset)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    """An account holder. The password is only ever stored hashed."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(150), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    avatar_url = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class Wallet(Base):
    """
    A named money container ("Cash", "BCA", "OVO", ...).

    `balance` is the opening balance given at creation. The current balance
    is derived from the journal (see app/services/balance.py).
    """

    __tablename__ = "wallets"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String(20), nullable=False, default="cash")  # cash | bank | ewallet
    balance = Column(Integer, nullable=False, default=0)  # minor units


class Category(Base):
    """Per-user income/expense tag."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    kind = Column(String(20), nullable=False)  # income | expense


class Transaction(Base):
    """
    A single dated monetary event.

    `amount` is always positive; `type` decides the sign when folded into
    a balance. Transfers move money from `wallet_id` to `to_wallet_id` and
    carry no category.
    """

    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Source wallet (required)
    wallet_id = Column(Integer, ForeignKey("wallets.id"), nullable=False, index=True)

    # Destination wallet (transfers only)
    to_wallet_id = Column(Integer, ForeignKey("wallets.id"), nullable=True, index=True)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)

    amount = Column(Integer, nullable=False)  # minor units
    type = Column(String(20), nullable=False)  # income | expense | transfer
    description = Column(Text, nullable=True)

    # User-picked date (defaults to now); created_at is server-assigned
    date = Column(DateTime, nullable=False, default=utcnow, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
