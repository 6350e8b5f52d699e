# routes_auth.py
"""
Public routes: register and login. Login returns a bearer token.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from config import Settings
from app.deps import get_db, get_settings
from app.schemas import AuthPayload, TokenOut, UserOut
from app.services import identity
from app.services.tokens import issue_token

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserOut, status_code=201)
def register(payload: AuthPayload, db: Session = Depends(get_db)):
    return identity.register(db, payload.username, payload.password)


@router.post("/login", response_model=TokenOut)
def login(
    payload: AuthPayload,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    user = identity.authenticate(db, payload.username, payload.password)
    token = issue_token(
        user.id,
        user.username,
        secret=settings.jwt_secret,
        ttl_seconds=settings.jwt_ttl_seconds,
    )
    return {"token": token}
