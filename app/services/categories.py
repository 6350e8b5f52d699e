# app/services/categories.py
#
# Category Registry
# Per-user income/expense tags.

import logging
from typing import List

from sqlalchemy.orm import Session

from models import Category, Transaction, CATEGORY_KINDS
from app.errors import Conflict, NotFound, ValidationError

logger = logging.getLogger(__name__)


def _check_kind(kind: str | None) -> str:
    if kind not in CATEGORY_KINDS:
        raise ValidationError(
            f"Invalid category type {kind!r}, expected one of {', '.join(CATEGORY_KINDS)}"
        )
    return kind


def get_owned_category(db: Session, user_id: int, category_id: int, lock: bool = False) -> Category:
    """Load a category only if `user_id` owns it; NotFound otherwise."""
    query = db.query(Category).filter(Category.id == category_id, Category.user_id == user_id)
    if lock:
        query = query.with_for_update()
    category = query.first()
    if category is None:
        raise NotFound("Category not found")
    return category


def list_categories(db: Session, user_id: int, kind: str | None = None) -> List[Category]:
    query = db.query(Category).filter(Category.user_id == user_id)
    if kind is not None:
        query = query.filter(Category.kind == _check_kind(kind))
    return query.order_by(Category.id).all()


def create_category(db: Session, user_id: int, name: str, kind: str) -> Category:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Category name is required")

    category = Category(user_id=user_id, name=name, kind=_check_kind(kind))
    db.add(category)
    db.commit()
    db.refresh(category)

    logger.debug("Created category id=%s for user id=%s", category.id, user_id)
    return category


def delete_category(db: Session, user_id: int, category_id: int) -> None:
    """
    Delete an owned category.

    Raises:
        NotFound: category missing or owned by someone else.
        Conflict: transactions still reference the category.
    """
    category = get_owned_category(db, user_id, category_id, lock=True)

    in_use = db.query(Transaction.id).filter(Transaction.category_id == category.id).first()
    if in_use is not None:
        db.rollback()
        raise Conflict("Category is in use by transactions")

    db.delete(category)
    db.commit()
    logger.debug("Deleted category id=%s for user id=%s", category_id, user_id)
