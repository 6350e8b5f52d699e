# app/services/wallets.py
#
# Wallet Ledger
# Owner-scoped wallets. Stored `balance` is the opening balance; views carry
# the current balance derived from the journal.

import logging
from dataclasses import dataclass
from typing import List

from sqlalchemy import or_
from sqlalchemy.orm import Session

from models import Transaction, Wallet, MAX_AMOUNT, WALLET_TYPES
from app.errors import Conflict, NotFound, ValidationError
from app.services import balance as balance_service

logger = logging.getLogger(__name__)


@dataclass
class WalletView:
    id: int
    user_id: int
    name: str
    type: str
    initial_balance: int
    balance: int


def _to_view(wallet: Wallet, current_balance: int) -> WalletView:
    return WalletView(
        id=wallet.id,
        user_id=wallet.user_id,
        name=wallet.name,
        type=wallet.type,
        initial_balance=wallet.balance,
        balance=current_balance,
    )


def get_owned_wallet(db: Session, user_id: int, wallet_id: int, lock: bool = False) -> Wallet:
    """
    Load a wallet only if `user_id` owns it.

    Raises NotFound for missing and foreign wallets alike.
    """
    query = db.query(Wallet).filter(Wallet.id == wallet_id, Wallet.user_id == user_id)
    if lock:
        query = query.with_for_update()
    wallet = query.first()
    if wallet is None:
        raise NotFound("Wallet not found")
    return wallet


def list_wallets(db: Session, user_id: int) -> List[WalletView]:
    wallets = db.query(Wallet).filter(Wallet.user_id == user_id).order_by(Wallet.id).all()
    balances = balance_service.wallet_balances(db, user_id)
    return [_to_view(w, balances.get(w.id, w.balance)) for w in wallets]


def get_wallet(db: Session, user_id: int, wallet_id: int) -> WalletView:
    wallet = get_owned_wallet(db, user_id, wallet_id)
    balances = balance_service.wallet_balances(db, user_id)
    return _to_view(wallet, balances.get(wallet.id, wallet.balance))


def create_wallet(
    db: Session,
    user_id: int,
    name: str,
    type: str | None = None,
    initial_balance: int | None = 0,
) -> WalletView:
    """
    Create a wallet. `type` defaults to "cash", `initial_balance` to 0.
    """
    name = (name or "").strip()
    if not name:
        raise ValidationError("Wallet name is required")

    wallet_type = type or "cash"
    if wallet_type not in WALLET_TYPES:
        raise ValidationError(
            f"Invalid wallet type {wallet_type!r}, expected one of {', '.join(WALLET_TYPES)}"
        )

    if initial_balance is None:
        initial_balance = 0
    if isinstance(initial_balance, bool) or not isinstance(initial_balance, int):
        raise ValidationError("Initial balance must be an integer")
    if abs(initial_balance) > MAX_AMOUNT:
        raise ValidationError(f"Initial balance must be between -{MAX_AMOUNT} and {MAX_AMOUNT}")

    wallet = Wallet(user_id=user_id, name=name, type=wallet_type, balance=initial_balance)
    db.add(wallet)
    db.commit()
    db.refresh(wallet)

    logger.debug("Created wallet id=%s for user id=%s", wallet.id, user_id)
    # a new wallet has no journal entries yet
    return _to_view(wallet, wallet.balance)


def delete_wallet(db: Session, user_id: int, wallet_id: int) -> None:
    """
    Delete an owned wallet.

    Raises:
        NotFound: wallet missing or owned by someone else.
        Conflict: transactions still reference the wallet.
    """
    wallet = get_owned_wallet(db, user_id, wallet_id, lock=True)

    in_use = (
        db.query(Transaction.id)
        .filter(or_(Transaction.wallet_id == wallet.id, Transaction.to_wallet_id == wallet.id))
        .first()
    )
    if in_use is not None:
        db.rollback()
        raise Conflict("Wallet is in use by transactions")

    db.delete(wallet)
    db.commit()
    logger.debug("Deleted wallet id=%s for user id=%s", wallet_id, user_id)
