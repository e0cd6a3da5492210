"""Application exception hierarchy.

Each error carries a ``message`` that is safe to show to callers and a
``context`` dict that is only ever logged.
"""


class PhotoFlowError(Exception):
    """Base class for application errors."""

    default_message = "An unexpected error occurred."

    def __init__(
        self, message: str | None = None, context: dict[str, object] | None = None
    ) -> None:
        self.message = message or self.default_message
        self.context = context or {}
        super().__init__(self.message)


class AuthenticationRequiredError(PhotoFlowError):
    """No valid session was presented."""

    default_message = "User not authenticated."


class InvalidCredentialsError(PhotoFlowError):
    """Login with an unknown email or a mismatched password."""

    default_message = "Invalid credentials."


class WrongPasswordError(PhotoFlowError):
    """The current password given for a password change is wrong."""

    default_message = "The current password is incorrect."


class DuplicateKeyError(PhotoFlowError):
    """A unique key (email or portfolio slug) is already taken."""

    default_message = "This value is already in use."

    def __init__(
        self,
        field: str,
        message: str | None = None,
        context: dict[str, object] | None = None,
    ) -> None:
        super().__init__(message, {**(context or {}), "field": field})
        self.field = field


class NotFoundError(PhotoFlowError):
    """A project, user or slug does not exist for the caller."""

    default_message = "The requested resource was not found."


class StorageFailureError(PhotoFlowError):
    """Storage I/O or SQL failure; the message is sanitized."""

    default_message = "A storage error occurred. Please try again later."


class ImportParseError(PhotoFlowError):
    """A backup document could not be parsed."""

    default_message = "Malformed backup JSON. Check that the file format is correct."
