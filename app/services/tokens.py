# app/services/tokens.py
# Role: Credential collaborator. Issues and verifies signed, expiring JWTs
#       and turns a verified token into an Identity value.

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from app.errors import Unauthorized

ALGORITHM = "HS256"


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, as resolved from a verified token."""

    user_id: int
    username: str
    expires_at: datetime


def issue_token(
    user_id: int,
    username: str,
    secret: str,
    ttl_seconds: int,
    now: datetime | None = None,
) -> str:
    """
    Sign a token for the given user.

    The subject is stored as a string (RFC 7519 requires StringOrURI).
    """
    now = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "username": username,
        "iat": now,
        "exp": now + timedelta(seconds=ttl_seconds),
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def verify_token(token: str, secret: str) -> Identity:
    """
    Verify signature and expiry and build the caller's Identity.

    Raises:
        Unauthorized: if the token is malformed, badly signed, expired,
            or lacks the expected claims.
    """
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise Unauthorized("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise Unauthorized("Invalid token") from exc

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError) as exc:
        raise Unauthorized("Invalid token") from exc

    username = payload.get("username")
    if not isinstance(username, str):
        raise Unauthorized("Invalid token")

    return Identity(
        user_id=user_id,
        username=username,
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
