"""WaterWise - client session and API access for rural flood-risk monitoring."""

__version__ = "0.1.0"

from waterwise.exceptions import (
    ApiError,
    AuthError,
    AuthErrorKind,
    NoActiveSessionError,
    ResourceCreationFailedError,
    StorageError,
)

__all__ = [
    "__version__",
    "ApiError",
    "AuthError",
    "AuthErrorKind",
    "NoActiveSessionError",
    "ResourceCreationFailedError",
    "StorageError",
]
