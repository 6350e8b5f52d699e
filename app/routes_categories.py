# routes_categories.py

from typing import List

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from models import MAX_ID
from app.deps import get_db, get_identity
from app.schemas import CategoryOut, CategoryPayload, MessageOut
from app.services import categories
from app.services.tokens import Identity

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=List[CategoryOut])
def list_categories(
    kind: str | None = Query(None, alias="type"),
    caller: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """List my categories, optionally only `?type=income` or `?type=expense`."""
    return categories.list_categories(db, caller.user_id, kind=kind)


@router.post("", response_model=CategoryOut, status_code=201)
def create_category(
    payload: CategoryPayload,
    caller: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    return categories.create_category(db, caller.user_id, payload.name, payload.kind)


@router.delete("/{category_id}", response_model=MessageOut)
def delete_category(
    category_id: int = Path(ge=1, le=MAX_ID),
    caller: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    categories.delete_category(db, caller.user_id, category_id)
    return {"message": "Deleted"}
