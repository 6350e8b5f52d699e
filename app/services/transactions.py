# app/services/transactions.py
"""
Transaction Journal.

Create / edit / delete dated monetary events for one user. Every write runs
the same validation pipeline before touching the table:

1. amount is a positive integer (minor units)
2. type is income, expense or transfer
3. the source wallet belongs to the caller
4. income/expense: the category belongs to the caller and matches the type
5. transfer: the destination wallet belongs to the caller and differs
   from the source
6. the date parses (or defaults to now)

Checks and the write share one database transaction and one commit.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, aliased

from models import Category, Transaction, Wallet, MAX_AMOUNT, TRANSACTION_TYPES, utcnow
from app.errors import NotFound, ValidationError
from app.services.categories import get_owned_category
from app.services.import_helpers import get_month_range, parse_transaction_date
from app.services.wallets import get_owned_wallet

logger = logging.getLogger(__name__)


@dataclass
class TransactionInput:
    """Caller-supplied fields for create and full-replace edit."""

    amount: Any
    type: str
    wallet_id: int
    to_wallet_id: Optional[int] = None
    category_id: Optional[int] = None
    description: Optional[str] = None
    date: Optional[str] = None


@dataclass
class TransactionView:
    """A transaction plus the display names of what it references."""

    id: int
    user_id: int
    wallet_id: int
    wallet_name: Optional[str]
    to_wallet_id: Optional[int]
    to_wallet_name: Optional[str]
    category_id: Optional[int]
    category_name: Optional[str]
    amount: int
    type: str
    description: Optional[str]
    date: datetime
    created_at: datetime


@dataclass
class _Validated:
    amount: int
    type: str
    wallet: Wallet
    to_wallet: Optional[Wallet]
    category: Optional[Category]
    description: Optional[str]
    date: datetime


# ---- Validation ----

def _check_amount(amount: Any) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValidationError("Amount must be a positive integer")
    if amount > MAX_AMOUNT:
        raise ValidationError(f"Amount must be at most {MAX_AMOUNT}")
    return amount


def _check_type(tx_type: Any) -> str:
    if tx_type not in TRANSACTION_TYPES:
        raise ValidationError(
            f"Invalid transaction type {tx_type!r}, expected one of {', '.join(TRANSACTION_TYPES)}"
        )
    return tx_type


def validate_transaction_input(
    db: Session,
    user_id: int,
    data: TransactionInput,
    now: Optional[datetime] = None,
) -> _Validated:
    """
    Run the full validation pipeline for `data` on behalf of `user_id`.

    `now` is the date used when `data.date` is empty (current time if None).

    Raises:
        ValidationError: malformed input or inconsistent references.
        NotFound: a referenced wallet/category is missing or not the caller's.
    """
    amount = _check_amount(data.amount)
    tx_type = _check_type(data.type)

    if data.wallet_id is None:
        raise ValidationError("walletId is required")
    wallet = get_owned_wallet(db, user_id, data.wallet_id, lock=True)

    to_wallet = None
    category = None

    if tx_type == "transfer":
        if data.to_wallet_id is None:
            raise ValidationError("toWalletId is required for transfers")
        if data.category_id is not None:
            raise ValidationError("Transfers cannot have a category")
        if data.to_wallet_id == data.wallet_id:
            raise ValidationError("Cannot transfer to the same wallet")
        to_wallet = get_owned_wallet(db, user_id, data.to_wallet_id, lock=True)
    else:
        if data.to_wallet_id is not None:
            raise ValidationError("toWalletId is only allowed for transfers")
        if data.category_id is None:
            raise ValidationError(f"categoryId is required for {tx_type} transactions")
        category = get_owned_category(db, user_id, data.category_id, lock=True)
        if category.kind != tx_type:
            raise ValidationError(
                f"Category {category.name!r} is a {category.kind} category, "
                f"not valid for a {tx_type} transaction"
            )

    description = (data.description or "").strip() or None
    tx_date = parse_transaction_date(data.date, default=now or utcnow())

    return _Validated(
        amount=amount,
        type=tx_type,
        wallet=wallet,
        to_wallet=to_wallet,
        category=category,
        description=description,
        date=tx_date,
    )


# ---- Views ----

def _view_query(db: Session, user_id: int):
    to_wallet = aliased(Wallet)
    return (
        db.query(
            Transaction,
            Wallet.name.label("wallet_name"),
            to_wallet.name.label("to_wallet_name"),
            Category.name.label("category_name"),
        )
        .outerjoin(Wallet, Wallet.id == Transaction.wallet_id)
        .outerjoin(to_wallet, to_wallet.id == Transaction.to_wallet_id)
        .outerjoin(Category, Category.id == Transaction.category_id)
        .filter(Transaction.user_id == user_id)
    )


def _to_view(tx: Transaction, wallet_name, to_wallet_name, category_name) -> TransactionView:
    return TransactionView(
        id=tx.id,
        user_id=tx.user_id,
        wallet_id=tx.wallet_id,
        wallet_name=wallet_name,
        to_wallet_id=tx.to_wallet_id,
        to_wallet_name=to_wallet_name,
        category_id=tx.category_id,
        category_name=category_name,
        amount=tx.amount,
        type=tx.type,
        description=tx.description,
        date=tx.date,
        created_at=tx.created_at,
    )


def _view_from_validated(tx: Transaction, v: _Validated) -> TransactionView:
    return _to_view(
        tx,
        v.wallet.name,
        v.to_wallet.name if v.to_wallet else None,
        v.category.name if v.category else None,
    )


def _get_owned_transaction(db: Session, user_id: int, transaction_id: int) -> Transaction:
    tx = (
        db.query(Transaction)
        .filter(Transaction.id == transaction_id, Transaction.user_id == user_id)
        .with_for_update()
        .first()
    )
    if tx is None:
        raise NotFound("Transaction not found")
    return tx


# ---- Queries ----

def list_transactions(
    db: Session,
    user_id: int,
    month: Optional[str] = None,
    tx_type: Optional[str] = None,
    wallet_id: Optional[int] = None,
) -> List[TransactionView]:
    """
    All of the user's transactions, most recent first.

    Optional filters: month ("YYYY-MM"), type, and a wallet (matches the
    source or the destination of a transfer).
    """
    query = _view_query(db, user_id)

    start, end_exclusive, _ = get_month_range(month)
    if start is not None:
        query = query.filter(Transaction.date >= start, Transaction.date < end_exclusive)

    if tx_type is not None:
        query = query.filter(Transaction.type == _check_type(tx_type))

    if wallet_id is not None:
        query = query.filter(
            or_(Transaction.wallet_id == wallet_id, Transaction.to_wallet_id == wallet_id)
        )

    rows = query.order_by(Transaction.date.desc(), Transaction.id.desc()).all()
    return [_to_view(*row) for row in rows]


def get_transaction(db: Session, user_id: int, transaction_id: int) -> TransactionView:
    row = _view_query(db, user_id).filter(Transaction.id == transaction_id).first()
    if row is None:
        raise NotFound("Transaction not found")
    return _to_view(*row)


# ---- Mutations ----

def create_transaction(db: Session, user_id: int, data: TransactionInput) -> TransactionView:
    now = utcnow()
    v = validate_transaction_input(db, user_id, data, now=now)

    tx = Transaction(
        user_id=user_id,
        wallet_id=v.wallet.id,
        to_wallet_id=v.to_wallet.id if v.to_wallet else None,
        category_id=v.category.id if v.category else None,
        amount=v.amount,
        type=v.type,
        description=v.description,
        date=v.date,
        created_at=now,
    )
    db.add(tx)
    db.commit()
    db.refresh(tx)

    logger.info(
        "Created %s transaction id=%s amount=%s for user id=%s",
        tx.type, tx.id, tx.amount, user_id,
    )
    return _view_from_validated(tx, v)


def update_transaction(
    db: Session,
    user_id: int,
    transaction_id: int,
    data: TransactionInput,
) -> TransactionView:
    """
    Replace every caller-editable field of an owned transaction.

    The target is checked first, so a missing or foreign id is NotFound
    whatever the new input contains. created_at is left untouched, and the
    existing date is kept when the new input has none.
    """
    tx = _get_owned_transaction(db, user_id, transaction_id)
    v = validate_transaction_input(db, user_id, data, now=tx.date)

    tx.wallet_id = v.wallet.id
    tx.to_wallet_id = v.to_wallet.id if v.to_wallet else None
    tx.category_id = v.category.id if v.category else None
    tx.amount = v.amount
    tx.type = v.type
    tx.description = v.description
    tx.date = v.date

    db.commit()
    db.refresh(tx)

    logger.info("Updated transaction id=%s for user id=%s", tx.id, user_id)
    return _view_from_validated(tx, v)


def delete_transaction(db: Session, user_id: int, transaction_id: int) -> None:
    """Delete an owned transaction; NotFound if missing or not the caller's."""
    tx = _get_owned_transaction(db, user_id, transaction_id)
    db.delete(tx)
    db.commit()
    logger.info("Deleted transaction id=%s for user id=%s", transaction_id, user_id)
