# routes_transactions.py
"""
Routes for the transaction journal and balance queries.
"""

from typing import List

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from models import MAX_ID
from app.deps import get_db, get_identity
from app.schemas import (
    MessageOut,
    SummaryOut,
    TotalOut,
    TransactionOut,
    TransactionPayload,
)
from app.services import balance
from app.services import transactions as journal
from app.services.tokens import Identity

router = APIRouter(prefix="/transactions", tags=["transactions"])


def _to_input(payload: TransactionPayload) -> journal.TransactionInput:
    return journal.TransactionInput(
        amount=payload.amount,
        type=payload.type,
        wallet_id=payload.wallet_id,
        to_wallet_id=payload.to_wallet_id,
        category_id=payload.category_id,
        description=payload.description,
        date=payload.date,
    )


@router.get("", response_model=List[TransactionOut])
def list_transactions(
    month: str | None = Query(None),
    tx_type: str | None = Query(None, alias="type"),
    wallet_id: int | None = Query(None, alias="walletId", ge=1, le=MAX_ID),
    caller: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """
    List my transactions, most recent first.

    Filters: ?month=YYYY-MM, ?type=income|expense|transfer, ?walletId=<id>
    """
    return journal.list_transactions(
        db, caller.user_id, month=month, tx_type=tx_type, wallet_id=wallet_id
    )


@router.post("", response_model=TransactionOut, status_code=201)
def create_transaction(
    payload: TransactionPayload,
    caller: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    return journal.create_transaction(db, caller.user_id, _to_input(payload))


# Fixed paths go before /{transaction_id}

@router.get("/total", response_model=TotalOut)
def get_total(
    caller: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """Net balance: income minus expense; transfers net to zero."""
    return {"balance": balance.total(db, caller.user_id)}


@router.get("/summary", response_model=SummaryOut)
def get_summary(
    month: str | None = Query(None),
    caller: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    return balance.summarize(db, caller.user_id, month=month)


@router.get("/{transaction_id}", response_model=TransactionOut)
def get_transaction(
    transaction_id: int = Path(ge=1, le=MAX_ID),
    caller: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    return journal.get_transaction(db, caller.user_id, transaction_id)


@router.put("/{transaction_id}", response_model=TransactionOut)
def update_transaction(
    payload: TransactionPayload,
    transaction_id: int = Path(ge=1, le=MAX_ID),
    caller: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    return journal.update_transaction(db, caller.user_id, transaction_id, _to_input(payload))


@router.delete("/{transaction_id}", response_model=MessageOut)
def delete_transaction(
    transaction_id: int = Path(ge=1, le=MAX_ID),
    caller: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    journal.delete_transaction(db, caller.user_id, transaction_id)
    return {"message": "Deleted successfully"}
