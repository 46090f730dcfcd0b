"""Contracts for the collaborators a SessionStore depends on."""

from typing import Callable, Protocol

from waterwise.models.credentials import Credential, Registration
from waterwise.models.identity import Identity
from waterwise.models.property import Property, PropertyCreate

IdentityCallback = Callable[[Identity | None], None]
Unsubscribe = Callable[[], None]


class AuthProvider(Protocol):
    """Remote identity provider.

    Failures are raised as :class:`waterwise.exceptions.AuthError`.
    """

    async def authenticate(self, credential: Credential) -> Identity:
        """Sign in with an existing account."""
        ...

    async def create_identity(self, registration: Registration) -> Identity:
        """Create a new account and sign in as it."""
        ...

    async def revoke_session(self) -> None:
        """End the provider-side session."""
        ...

    def subscribe(self, callback: IdentityCallback) -> Unsubscribe:
        """Register for session changes that happen outside our calls."""
        ...


class PropertyCreator(Protocol):
    """Creates the property record owned by an identity."""

    async def create_property(self, owner_id: str, data: PropertyCreate) -> Property:
        ...


class KeyValueStorage(Protocol):
    """Durable local storage.

    Failures are raised as :class:`waterwise.exceptions.StorageError`.
    """

    async def get(self, key: str) -> bytes | None:
        ...

    async def set(self, key: str, value: bytes) -> None:
        ...

    async def remove(self, key: str) -> None:
        ...
