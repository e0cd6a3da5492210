"""Account registration, login and profile management."""

import logging
from dataclasses import dataclass

from photoflow.domain.models import ProfileUpdate, PublicUser, User
from photoflow.errors import (
    AuthenticationRequiredError,
    DuplicateKeyError,
    InvalidCredentialsError,
    WrongPasswordError,
)
from photoflow.security import (
    DEFAULT_ROUNDS,
    dummy_hash,
    hash_password,
    verify_password,
)
from photoflow.services.sessions import SessionManager
from photoflow.services.storage import Storage

logger = logging.getLogger(__name__)

SLUG_TAKEN_MESSAGE = "This portfolio link is already in use. Please choose another."
EMAIL_TAKEN_MESSAGE = "This email is already in use."


@dataclass(frozen=True)
class OperationResult:
    """Outcome of an account operation with a user-facing message."""

    success: bool
    message: str


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a login attempt; carries a session token on success."""

    success: bool
    message: str | None = None
    token: str | None = None


@dataclass(frozen=True)
class ProfileResult:
    """Outcome of a profile update; carries the re-issued token on success."""

    success: bool
    message: str
    token: str | None = None
    user: PublicUser | None = None


@dataclass
class AuthService:
    """Application service for accounts and sessions."""

    storage: Storage
    sessions: SessionManager
    bcrypt_rounds: int = DEFAULT_ROUNDS

    async def register(self, email: str, password: str) -> OperationResult:
        """Create a user with an empty, incomplete profile."""
        email = email.strip()
        if not email or not password:
            return OperationResult(False, "Email and password are required.")
        if await self.storage.find_user_by_email(email):
            return OperationResult(False, EMAIL_TAKEN_MESSAGE)
        user = User(
            email=email,
            password=hash_password(password, self.bcrypt_rounds),
            name="",
            profile_complete=False,
        )
        try:
            await self.storage.add_user(user)
        except DuplicateKeyError:
            return OperationResult(False, EMAIL_TAKEN_MESSAGE)
        logger.info("Registered user %s", email)
        return OperationResult(True, "Registration successful!")

    async def login(self, email: str, password: str) -> LoginResult:
        """Verify credentials and issue a session token."""
        try:
            user = await self._authenticate(email.strip(), password)
        except InvalidCredentialsError as exc:
            return LoginResult(success=False, message=exc.message)
        return LoginResult(success=True, token=self.sessions.issue(user.public()))

    async def current_user(self, token: str | None) -> PublicUser | None:
        """Return fresh public fields for the session's user, if valid."""
        snapshot = self.sessions.verify(token)
        if snapshot is None:
            return None
        user = await self.storage.find_user_by_email(snapshot.email)
        return user.public() if user else None

    async def change_password(
        self, token: str | None, current_password: str, new_password: str
    ) -> OperationResult:
        """Replace the password after checking the current one."""
        try:
            email = self._require_email(token)
            user = await self.storage.find_user_by_email(email)
            if user is None or not verify_password(current_password, user.password):
                raise WrongPasswordError()
        except (AuthenticationRequiredError, WrongPasswordError) as exc:
            return OperationResult(False, exc.message)
        if not new_password:
            return OperationResult(False, "The new password must not be empty.")
        await self.storage.update_user(
            email, {"password": hash_password(new_password, self.bcrypt_rounds)}
        )
        return OperationResult(True, "Password changed successfully!")

    async def update_profile(
        self, token: str | None, update: ProfileUpdate
    ) -> ProfileResult:
        """Save profile fields, mark the profile complete and re-issue the token."""
        try:
            email = self._require_email(token)
        except AuthenticationRequiredError as exc:
            return ProfileResult(False, exc.message)

        changes = update.changes()
        slug = changes.get("portfolio_slug")
        if isinstance(slug, str):
            holder = await self.storage.find_user_by_slug(slug)
            if holder is not None and holder.email != email:
                return ProfileResult(False, SLUG_TAKEN_MESSAGE)

        try:
            updated = await self.storage.update_user(
                email, {**changes, "profile_complete": True}
            )
        except DuplicateKeyError:
            return ProfileResult(False, SLUG_TAKEN_MESSAGE)
        if updated is None:
            return ProfileResult(False, AuthenticationRequiredError.default_message)

        public = updated.public()
        return ProfileResult(
            True, "Profile updated!", token=self.sessions.issue(public), user=public
        )

    async def _authenticate(self, email: str, password: str) -> User:
        user = await self.storage.find_user_by_email(email)
        if user is None:
            verify_password(password, dummy_hash(self.bcrypt_rounds))
            raise InvalidCredentialsError()
        if not verify_password(password, user.password):
            raise InvalidCredentialsError()
        return user

    def _require_email(self, token: str | None) -> str:
        snapshot = self.sessions.verify(token)
        if snapshot is None:
            raise AuthenticationRequiredError()
        return snapshot.email
