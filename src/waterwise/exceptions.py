"""Custom exceptions for WaterWise."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from waterwise.models.identity import Identity


class AuthErrorKind(str, Enum):
    """Classified reasons an authentication operation failed."""

    INVALID_CREDENTIAL = "invalid_credential"
    PRINCIPAL_NOT_FOUND = "principal_not_found"
    RATE_LIMITED = "rate_limited"
    NETWORK_UNAVAILABLE = "network_unavailable"
    RESOURCE_CREATION_FAILED = "resource_creation_failed"
    NO_ACTIVE_SESSION = "no_active_session"
    EMAIL_IN_USE = "email_in_use"
    WEAK_PASSWORD = "weak_password"
    ACCOUNT_DISABLED = "account_disabled"
    UNKNOWN = "unknown"


class AuthError(Exception):
    """Base class for classified authentication errors.

    Consumers branch on ``kind`` (or the subclass), never on the message
    text. The message is diagnostic only; user-facing text comes from
    :func:`waterwise.messages.message_for`.
    """

    kind: AuthErrorKind = AuthErrorKind.UNKNOWN

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        super().__init__(detail or self.kind.value)


class InvalidCredentialError(AuthError):
    """Raised when the identifier/secret pair is rejected."""

    kind = AuthErrorKind.INVALID_CREDENTIAL


class PrincipalNotFoundError(AuthError):
    """Raised when no account exists for the identifier."""

    kind = AuthErrorKind.PRINCIPAL_NOT_FOUND


class RateLimitedError(AuthError):
    """Raised when the provider is throttling attempts."""

    kind = AuthErrorKind.RATE_LIMITED


class NetworkUnavailableError(AuthError):
    """Raised when the provider could not be reached."""

    kind = AuthErrorKind.NETWORK_UNAVAILABLE


class EmailInUseError(AuthError):
    """Raised when registering an email that already has an account."""

    kind = AuthErrorKind.EMAIL_IN_USE


class WeakPasswordError(AuthError):
    """Raised when the provider rejects a password as too weak."""

    kind = AuthErrorKind.WEAK_PASSWORD


class AccountDisabledError(AuthError):
    """Raised when the account exists but has been disabled."""

    kind = AuthErrorKind.ACCOUNT_DISABLED


class NoActiveSessionError(AuthError):
    """Raised when an operation needs a signed-in identity and there is none."""

    kind = AuthErrorKind.NO_ACTIVE_SESSION


class UnknownAuthError(AuthError):
    """Raised for collaborator failures that fit no other kind."""

    kind = AuthErrorKind.UNKNOWN


class ResourceCreationFailedError(AuthError):
    """Raised when sign-up created the identity but not its property.

    The identity is kept and signed in; the caller can retry with
    ``SessionStore.create_property``.
    """

    kind = AuthErrorKind.RESOURCE_CREATION_FAILED

    def __init__(self, identity: Identity, detail: str | None = None) -> None:
        self.identity = identity
        super().__init__(detail)


_ERRORS_BY_KIND: dict[AuthErrorKind, type[AuthError]] = {
    AuthErrorKind.INVALID_CREDENTIAL: InvalidCredentialError,
    AuthErrorKind.PRINCIPAL_NOT_FOUND: PrincipalNotFoundError,
    AuthErrorKind.RATE_LIMITED: RateLimitedError,
    AuthErrorKind.NETWORK_UNAVAILABLE: NetworkUnavailableError,
    AuthErrorKind.EMAIL_IN_USE: EmailInUseError,
    AuthErrorKind.WEAK_PASSWORD: WeakPasswordError,
    AuthErrorKind.ACCOUNT_DISABLED: AccountDisabledError,
    AuthErrorKind.NO_ACTIVE_SESSION: NoActiveSessionError,
    AuthErrorKind.UNKNOWN: UnknownAuthError,
}


def auth_error_for(kind: AuthErrorKind, detail: str | None = None) -> AuthError:
    """Build the AuthError subclass for a kind.

    ``RESOURCE_CREATION_FAILED`` needs an identity and is not built here;
    it falls back to UnknownAuthError.
    """
    error_cls = _ERRORS_BY_KIND.get(kind, UnknownAuthError)
    return error_cls(detail)


class StorageError(Exception):
    """Raised when durable local storage cannot be read or written."""

    def __init__(self, key: str, operation: str, detail: str | None = None) -> None:
        self.key = key
        self.operation = operation
        super().__init__(
            f"Storage {operation} failed for key={key!r}"
            + (f": {detail}" if detail else "")
        )


class ApiError(Exception):
    """Raised when a WaterWise API request fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
