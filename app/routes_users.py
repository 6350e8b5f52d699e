# routes_users.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.deps import get_db, get_identity
from app.schemas import UserOut
from app.services import identity
from app.services.tokens import Identity

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserOut)
def read_me(
    caller: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """Profile of the authenticated user (never includes the password hash)."""
    return identity.get_user(db, caller.user_id)
