from datetime import datetime, timedelta, timezone

import jwt
import pytest

from app.errors import Unauthorized
from app.services.tokens import Identity, issue_token, verify_token

SECRET = "unit-test-secret-that-is-32-bytes-or-more"


class TestTokens:
    """Tests for issuing and verifying bearer tokens."""

    def test_issue_and_verify(self):
        token = issue_token(7, "alice", secret=SECRET, ttl_seconds=3600)

        caller = verify_token(token, SECRET)

        assert isinstance(caller, Identity)
        assert caller.user_id == 7
        assert caller.username == "alice"
        assert caller.expires_at > datetime.now(timezone.utc)

    def test_default_lifetime_is_bounded(self):
        now = datetime(2025, 1, 1, tzinfo=timezone.utc)
        token = issue_token(1, "alice", secret=SECRET, ttl_seconds=3600, now=now)

        payload = jwt.decode(token, SECRET, algorithms=["HS256"], options={"verify_exp": False})

        assert payload["exp"] - payload["iat"] == 3600
        assert payload["sub"] == "1"

    def test_identity_is_immutable(self):
        caller = verify_token(issue_token(1, "alice", SECRET, 60), SECRET)

        with pytest.raises(AttributeError):
            caller.user_id = 2

    def test_expired_token(self):
        issued = datetime.now(timezone.utc) - timedelta(hours=2)
        token = issue_token(1, "alice", secret=SECRET, ttl_seconds=3600, now=issued)

        with pytest.raises(Unauthorized):
            verify_token(token, SECRET)

    def test_wrong_secret(self):
        token = issue_token(1, "alice", secret=SECRET, ttl_seconds=3600)

        with pytest.raises(Unauthorized):
            verify_token(token, "another-secret-that-is-32-bytes-or-more")

    def test_garbage_token(self):
        with pytest.raises(Unauthorized):
            verify_token("not.a.token", SECRET)

    def test_token_without_numeric_subject(self):
        token = jwt.encode(
            {
                "sub": "alice",
                "username": "alice",
                "exp": datetime.now(timezone.utc) + timedelta(hours=1),
            },
            SECRET,
            algorithm="HS256",
        )

        with pytest.raises(Unauthorized):
            verify_token(token, SECRET)

    def test_token_without_expiry(self):
        token = jwt.encode({"sub": "1", "username": "alice"}, SECRET, algorithm="HS256")

        with pytest.raises(Unauthorized):
            verify_token(token, SECRET)
