# app/services/identity.py
#
# Identity Store
# Registers users, checks passwords, and loads user profiles.
# Passwords are hashed with bcrypt (random salt per hash) and never logged.

import logging

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import User
from app.errors import Conflict, NotFound, Unauthorized, ValidationError

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6
# bcrypt only looks at the first 72 bytes and newer releases reject longer input
MAX_PASSWORD_BYTES = 72

# Compared against when the username is unknown, so a failed login costs
# one bcrypt check either way.
_DUMMY_HASH = bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt()).decode("utf-8")


# ---- Password hashing ----

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # malformed stored hash, or password over the bcrypt byte limit
        return False


# ---- Users ----

def _validate_credentials(username: str, password: str) -> str:
    username = (username or "").strip()
    if len(username) < MIN_USERNAME_LENGTH:
        raise ValidationError(
            f"Username must be at least {MIN_USERNAME_LENGTH} characters"
        )
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
        )
    return username


def register(db: Session, username: str, password: str) -> User:
    """
    Create a user.

    Raises:
        ValidationError: username/password too short.
        Conflict: username already taken.
    """
    username = _validate_credentials(username, password)

    user = User(username=username, password_hash=hash_password(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.info("Registration rejected, username taken: %s", username)
        raise Conflict("Username already exists") from exc

    db.refresh(user)
    logger.info("Registered user id=%s username=%s", user.id, user.username)
    return user


def authenticate(db: Session, username: str, password: str) -> User:
    """
    Check a username/password pair.

    Unknown usernames and wrong passwords fail the same way.
    """
    user = (
        db.query(User)
        .filter(User.username == (username or "").strip())
        .first()
    )

    if user is None:
        verify_password(password or "", _DUMMY_HASH)
        logger.info("Failed login for username=%s", username)
        raise Unauthorized("Invalid credentials")

    if not verify_password(password or "", user.password_hash):
        logger.info("Failed login for username=%s", username)
        raise Unauthorized("Invalid credentials")

    return user


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise NotFound("User not found")
    return user
