# app/services/balance.py
"""
Balance Aggregator.

Derives balances from the transaction journal on every call:

- total:            income adds, expense subtracts, transfers net to zero
- wallet_balances:  opening balance + income - expense
                    - outgoing transfers + incoming transfers
- summarize:        income/expense/balance for a period, plus per-category totals

Nothing is cached; each call is a handful of aggregate queries that scan
the user's transactions once.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from models import Category, Transaction, Wallet
from app.services.import_helpers import get_month_range


@dataclass
class CategoryTotal:
    category_id: int
    name: str
    kind: str
    total: int


@dataclass
class Summary:
    income: int
    expense: int
    balance: int
    month: Optional[str] = None
    by_category: List[CategoryTotal] = field(default_factory=list)


# Signed contribution of one row to the user's net balance
_net_amount = case(
    (Transaction.type == "income", Transaction.amount),
    (Transaction.type == "expense", -Transaction.amount),
    else_=0,
)

# Signed contribution of one row to its source wallet
_source_wallet_amount = case(
    (Transaction.type == "income", Transaction.amount),
    else_=-Transaction.amount,
)


def _apply_period(query, start: Optional[datetime], end_exclusive: Optional[datetime]):
    if start is not None:
        query = query.filter(Transaction.date >= start)
    if end_exclusive is not None:
        query = query.filter(Transaction.date < end_exclusive)
    return query


def total(db: Session, user_id: int) -> int:
    """Net balance of all the user's transactions."""
    value = (
        db.query(func.coalesce(func.sum(_net_amount), 0))
        .filter(Transaction.user_id == user_id)
        .scalar()
    )
    return int(value or 0)


def wallet_balances(db: Session, user_id: int) -> Dict[int, int]:
    """Current balance of every wallet the user owns, keyed by wallet id."""
    balances: Dict[int, int] = {
        wallet_id: int(opening or 0)
        for wallet_id, opening in (
            db.query(Wallet.id, Wallet.balance).filter(Wallet.user_id == user_id).all()
        )
    }

    outgoing = (
        db.query(Transaction.wallet_id, func.sum(_source_wallet_amount))
        .filter(Transaction.user_id == user_id)
        .group_by(Transaction.wallet_id)
        .all()
    )
    for wallet_id, amount in outgoing:
        if wallet_id in balances:
            balances[wallet_id] += int(amount or 0)

    incoming = (
        db.query(Transaction.to_wallet_id, func.sum(Transaction.amount))
        .filter(
            Transaction.user_id == user_id,
            Transaction.type == "transfer",
            Transaction.to_wallet_id.isnot(None),
        )
        .group_by(Transaction.to_wallet_id)
        .all()
    )
    for wallet_id, amount in incoming:
        if wallet_id in balances:
            balances[wallet_id] += int(amount or 0)

    return balances


def summarize(db: Session, user_id: int, month: Optional[str] = None) -> Summary:
    """
    Income, expense and net balance, optionally restricted to one month
    ("YYYY-MM"), with expense/income totals per category.
    """
    start, end_exclusive, normalized_month = get_month_range(month)

    totals_query = db.query(
        func.coalesce(
            func.sum(case((Transaction.type == "income", Transaction.amount), else_=0)), 0
        ).label("income"),
        func.coalesce(
            func.sum(case((Transaction.type == "expense", Transaction.amount), else_=0)), 0
        ).label("expense"),
    ).filter(Transaction.user_id == user_id)
    income, expense = _apply_period(totals_query, start, end_exclusive).one()

    category_sum = func.sum(Transaction.amount)
    category_query = (
        db.query(Category.id, Category.name, Category.kind, category_sum.label("total"))
        .join(Transaction, Transaction.category_id == Category.id)
        .filter(Transaction.user_id == user_id, Category.user_id == user_id)
    )
    rows = (
        _apply_period(category_query, start, end_exclusive)
        .group_by(Category.id, Category.name, Category.kind)
        .order_by(category_sum.desc(), Category.id)
        .all()
    )

    return Summary(
        income=int(income or 0),
        expense=int(expense or 0),
        balance=int(income or 0) - int(expense or 0),
        month=normalized_month,
        by_category=[
            CategoryTotal(category_id=r.id, name=r.name, kind=r.kind, total=int(r.total or 0))
            for r in rows
        ],
    )
