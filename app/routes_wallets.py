# routes_wallets.py
"""
Wallet routes. Every wallet returned carries its opening balance and the
current balance derived from the journal.
"""

from typing import List

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from models import MAX_ID
from app.deps import get_db, get_identity
from app.schemas import MessageOut, WalletOut, WalletPayload
from app.services import wallets
from app.services.tokens import Identity

router = APIRouter(prefix="/wallets", tags=["wallets"])


@router.get("", response_model=List[WalletOut])
def list_wallets(
    caller: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    return wallets.list_wallets(db, caller.user_id)


@router.post("", response_model=WalletOut, status_code=201)
def create_wallet(
    payload: WalletPayload,
    caller: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    return wallets.create_wallet(
        db,
        caller.user_id,
        name=payload.name,
        type=payload.type,
        initial_balance=payload.balance,
    )


@router.get("/{wallet_id}", response_model=WalletOut)
def get_wallet(
    wallet_id: int = Path(ge=1, le=MAX_ID),
    caller: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    return wallets.get_wallet(db, caller.user_id, wallet_id)


@router.delete("/{wallet_id}", response_model=MessageOut)
def delete_wallet(
    wallet_id: int = Path(ge=1, le=MAX_ID),
    caller: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    wallets.delete_wallet(db, caller.user_id, wallet_id)
    return {"message": "Deleted"}
