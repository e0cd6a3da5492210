"""Tests for session tokens and password hashing."""

from datetime import UTC, datetime, timedelta

from photoflow.domain.models import PublicUser
from photoflow.security import hash_password, verify_password
from photoflow.services.sessions import SessionManager
from tests.conftest import TEST_ROUNDS, TEST_SECRET


def test_issue_and_verify_round_trip(sessions: SessionManager) -> None:
    user = PublicUser(email="jane@x.com", name="Jane", portfolio_slug="jane")

    token = sessions.issue(user)
    verified = sessions.verify(token)

    assert verified == user


def test_expired_token_is_rejected() -> None:
    issued_at = datetime.now(tz=UTC) - timedelta(days=2)
    stale = SessionManager(secret=TEST_SECRET, clock=lambda: issued_at)
    fresh = SessionManager(secret=TEST_SECRET)

    token = stale.issue(PublicUser(email="jane@x.com"))

    assert fresh.verify(token) is None


def test_token_signed_with_other_secret_is_rejected(sessions: SessionManager) -> None:
    forged = SessionManager(secret="other-secret").issue(PublicUser(email="x@x.com"))

    assert sessions.verify(forged) is None


def test_tampered_and_missing_tokens_are_rejected(sessions: SessionManager) -> None:
    token = sessions.issue(PublicUser(email="jane@x.com"))
    header, payload, signature = token.split(".")

    assert sessions.verify(f"{header}.{payload}x.{signature}") is None
    assert sessions.verify("not-a-token") is None
    assert sessions.verify("") is None
    assert sessions.verify(None) is None


def test_password_hash_verifies_only_the_original() -> None:
    hashed = hash_password("s3cret", TEST_ROUNDS)

    assert hashed != "s3cret"
    assert verify_password("s3cret", hashed) is True
    assert verify_password("wrong", hashed) is False


def test_long_passwords_are_not_truncated() -> None:
    base = "x" * 80
    hashed = hash_password(base + "a", TEST_ROUNDS)

    assert verify_password(base + "b", hashed) is False


def test_verify_against_non_bcrypt_value_fails() -> None:
    assert verify_password("pw", "plain-text") is False
