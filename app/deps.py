# app/deps.py
# Role: Shared request-level dependencies.
#       Provides the per-request database session, the app settings, and
#       the Access Guard that turns a bearer token into the caller's Identity.

"""
Shared dependencies for the finance tracker API.
"""

from typing import Generator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from config import Settings
from app.errors import Unauthorized
from app.services.tokens import Identity, verify_token

# auto_error=False so a missing header reaches our own Unauthorized handler
bearer_scheme = HTTPBearer(auto_error=False)

# -------------------------------------------------------------------
# Settings
# -------------------------------------------------------------------

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

# -------------------------------------------------------------------
# Database dependency
# -------------------------------------------------------------------

def get_db(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session and ensures it is closed.

    The session factory is created by main.create_app and kept on app.state.
    Closing rolls back anything left uncommitted.

    Typical usage in routes:
        db: Session = Depends(get_db)
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()

# -------------------------------------------------------------------
# Access Guard
# -------------------------------------------------------------------

def get_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> Identity:
    """
    Resolve `Authorization: Bearer <token>` into the caller's Identity.

    Raises Unauthorized when the header is missing or the token is invalid
    or expired.
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Missing credentials")
    return verify_token(credentials.credentials, settings.jwt_secret)
