"""Client-side session state and its collaborators."""

from waterwise.session.protocols import AuthProvider, KeyValueStorage, PropertyCreator
from waterwise.session.store import IDENTITY_KEY, RESOURCE_KEY, SessionStore

__all__ = [
    "AuthProvider",
    "IDENTITY_KEY",
    "KeyValueStorage",
    "PropertyCreator",
    "RESOURCE_KEY",
    "SessionStore",
]
