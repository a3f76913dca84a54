"""Error taxonomy for the account and authentication core.

Every failure the core reports derives from TollgateError so the HTTP layer
can translate them in one place.
"""


class TollgateError(Exception):
    """Base exception for all account and authentication failures."""

    message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class ConflictError(TollgateError):
    """Raised when a unique account attribute is already taken."""

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(message or f"{field.replace('_', ' ').capitalize()} already exists")
        self.field = field


class InvalidCredentialsError(TollgateError):
    """Raised when a username/password pair does not match.

    Unknown usernames and wrong passwords raise the same error.
    """

    message = "Invalid username or password"


class EmailNotVerifiedError(TollgateError):
    """Raised on login when verification is required and still pending."""

    message = "Email not verified"


class InvalidTokenError(TollgateError):
    """Raised when a session token is malformed, forged or otherwise unusable."""

    message = "Invalid token"


class TokenRevokedError(InvalidTokenError):
    """Raised when a session token has been blacklisted by logout."""

    message = "Token has been revoked"


class SessionExpiredError(TollgateError):
    """Raised when a session token is past its expiry."""

    message = "Token has expired"


class InvalidOrExpiredTokenError(TollgateError):
    """Raised when a verification or reset token does not exist."""

    message = "Invalid or expired token"


class TokenExpiredError(TollgateError):
    """Raised when a verification or reset token exists but is past its expiry."""

    message = "Token has expired"


class AccountNotFoundError(TollgateError):
    """Raised when an account referenced by a token or session no longer exists."""

    message = "Account not found"


class HashingError(TollgateError):
    """Raised when the password hasher fails to produce a hash."""

    message = "Failed to hash password"


class StorageError(TollgateError):
    """Raised when the backing store fails."""

    message = "Storage operation failed"


class NotificationError(TollgateError):
    """Raised when an outbound notification could not be delivered."""

    message = "Failed to send notification"
