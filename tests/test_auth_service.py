"""Tests for the account service."""

import asyncio

from photoflow.domain.models import ProfileUpdate
from photoflow.services import auth
from photoflow.services.auth import (
    EMAIL_TAKEN_MESSAGE,
    SLUG_TAKEN_MESSAGE,
    AuthService,
)


def test_register_then_duplicate_is_rejected(auth_service: AuthService) -> None:
    first = asyncio.run(auth_service.register("jane@x.com", "pw"))
    second = asyncio.run(auth_service.register("jane@x.com", "other"))

    assert first.success is True
    assert first.message == "Registration successful!"
    assert second.success is False
    assert second.message == EMAIL_TAKEN_MESSAGE
    assert len(asyncio.run(auth_service.storage.list_users())) == 1
    assert asyncio.run(auth_service.login("jane@x.com", "pw")).success is True
    assert asyncio.run(auth_service.login("jane@x.com", "other")).success is False


def test_register_stores_a_hash_and_incomplete_profile(
    auth_service: AuthService,
) -> None:
    asyncio.run(auth_service.register("jane@x.com", "pw"))

    stored = asyncio.run(auth_service.storage.find_user_by_email("jane@x.com"))

    assert stored is not None
    assert stored.password != "pw"
    assert stored.profile_complete is False
    assert stored.name == ""


def test_register_requires_email_and_password(auth_service: AuthService) -> None:
    assert asyncio.run(auth_service.register("", "pw")).success is False
    assert asyncio.run(auth_service.register("jane@x.com", "")).success is False


def test_login_with_wrong_password_is_rejected(auth_service: AuthService) -> None:
    asyncio.run(auth_service.register("jane@x.com", "pw"))

    wrong = asyncio.run(auth_service.login("jane@x.com", "wrongpw"))
    unknown = asyncio.run(auth_service.login("nobody@x.com", "pw"))

    assert wrong.success is False
    assert wrong.message == "Invalid credentials."
    assert wrong.token is None
    assert unknown.message == "Invalid credentials."


def test_login_with_unknown_email_still_checks_a_hash(
    auth_service: AuthService, monkeypatch
) -> None:
    checked: list[str] = []

    def recording_verify(password: str, hashed_password: str) -> bool:
        checked.append(hashed_password)
        return False

    monkeypatch.setattr(auth, "verify_password", recording_verify)

    result = asyncio.run(auth_service.login("nobody@x.com", "pw"))

    assert result.success is False
    assert len(checked) == 1
    assert checked[0].startswith("$2b$")


def test_login_issues_token_for_current_user(auth_service: AuthService) -> None:
    asyncio.run(auth_service.register("jane@x.com", "pw"))

    result = asyncio.run(auth_service.login("jane@x.com", "pw"))
    user = asyncio.run(auth_service.current_user(result.token))

    assert result.success is True
    assert user is not None
    assert user.email == "jane@x.com"
    assert user.profile_complete is False


def test_current_user_without_session(auth_service: AuthService) -> None:
    assert asyncio.run(auth_service.current_user(None)) is None
    assert asyncio.run(auth_service.current_user("garbage")) is None


def test_current_user_after_account_deleted(
    auth_service: AuthService, signed_in
) -> None:
    token = signed_in("jane@x.com")
    asyncio.run(auth_service.storage.delete_user("jane@x.com"))

    assert asyncio.run(auth_service.current_user(token)) is None


def test_change_password(auth_service: AuthService, signed_in) -> None:
    token = signed_in("jane@x.com", "old")

    wrong = asyncio.run(auth_service.change_password(token, "nope", "new"))
    changed = asyncio.run(auth_service.change_password(token, "old", "new"))

    assert wrong.success is False
    assert wrong.message == "The current password is incorrect."
    assert changed.success is True
    assert asyncio.run(auth_service.login("jane@x.com", "old")).success is False
    assert asyncio.run(auth_service.login("jane@x.com", "new")).success is True


def test_change_password_requires_session(auth_service: AuthService) -> None:
    result = asyncio.run(auth_service.change_password(None, "old", "new"))

    assert result.success is False
    assert result.message == "User not authenticated."


def test_update_profile_completes_onboarding(
    auth_service: AuthService, signed_in
) -> None:
    token = signed_in("jane@x.com")

    result = asyncio.run(
        auth_service.update_profile(
            token, ProfileUpdate(name="Jane", portfolio_slug="jane-portfolio")
        )
    )

    assert result.success is True
    assert result.user is not None
    assert result.user.profile_complete is True
    assert result.user.portfolio_slug == "jane-portfolio"
    refreshed = auth_service.sessions.verify(result.token)
    assert refreshed is not None
    assert refreshed.name == "Jane"
    assert refreshed.profile_complete is True


def test_update_profile_rejects_taken_slug(
    auth_service: AuthService, signed_in
) -> None:
    first = signed_in("jane@x.com")
    second = signed_in("john@x.com")
    asyncio.run(
        auth_service.update_profile(
            first, ProfileUpdate(portfolio_slug="jane-portfolio")
        )
    )

    result = asyncio.run(
        auth_service.update_profile(
            second, ProfileUpdate(portfolio_slug="jane-portfolio")
        )
    )

    assert result.success is False
    assert result.message == SLUG_TAKEN_MESSAGE
    john = asyncio.run(auth_service.storage.find_user_by_email("john@x.com"))
    assert john is not None
    assert john.portfolio_slug is None
    assert john.profile_complete is False


def test_update_profile_leaves_unset_fields(
    auth_service: AuthService, signed_in
) -> None:
    token = signed_in("jane@x.com")
    asyncio.run(
        auth_service.update_profile(token, ProfileUpdate(name="Jane", company="Studio"))
    )

    asyncio.run(auth_service.update_profile(token, ProfileUpdate(phone="555")))

    stored = asyncio.run(auth_service.storage.find_user_by_email("jane@x.com"))
    assert stored is not None
    assert stored.company == "Studio"
    assert stored.phone == "555"


def test_update_profile_requires_session(auth_service: AuthService) -> None:
    result = asyncio.run(auth_service.update_profile(None, ProfileUpdate(name="X")))

    assert result.success is False
    assert result.token is None
