"""Session store: the single owner of the client's authentication state.

Tracks the signed-in identity and its property, mediates sign-in,
sign-up, logout and profile updates, persists the identity across
restarts and notifies observers of every transition.

Concurrency: operations are not serialized. Each one replaces the state
in a single assignment once its awaited work resolves, so overlapping
calls are last-write-wins. Persistence writes are serialized and always
write the state current at the time of writing.
"""

import asyncio
import logging
from datetime import UTC, datetime
from typing import Callable

from pydantic import ValidationError

from waterwise.exceptions import (
    AuthError,
    NetworkUnavailableError,
    NoActiveSessionError,
    ResourceCreationFailedError,
    StorageError,
    UnknownAuthError,
)
from waterwise.models.credentials import Credential, Registration
from waterwise.models.identity import Identity
from waterwise.models.property import Property, PropertyCreate
from waterwise.models.session import SessionPhase, SessionState
from waterwise.session.protocols import (
    AuthProvider,
    KeyValueStorage,
    PropertyCreator,
    Unsubscribe,
)

logger = logging.getLogger(__name__)

IDENTITY_KEY = "identity"
RESOURCE_KEY = "resource"

StateListener = Callable[[SessionState], None]


def _classify(error: Exception) -> AuthError:
    """Turn a collaborator failure into an AuthError."""
    if isinstance(error, AuthError):
        return error
    if isinstance(error, (ConnectionError, TimeoutError)):
        return NetworkUnavailableError(type(error).__name__)
    return UnknownAuthError(type(error).__name__)


class SessionStore:
    """Owner and single writer of the SessionState.

    Construct one per application and pass it to consumers. Consumers read
    ``state`` or ``subscribe`` to changes; they never write the state.

    Usage:
        async with SessionStore(auth, storage, api) as store:
            await store.sign_in(Credential(email=..., password=...))
    """

    def __init__(
        self,
        auth: AuthProvider,
        storage: KeyValueStorage,
        properties: PropertyCreator | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            auth: Identity provider
            storage: Durable local storage for the identity and property
            properties: Creates properties during sign-up; without it,
                sign-up with a property payload fails with
                ResourceCreationFailedError after the identity is kept
        """
        self._auth = auth
        self._storage = storage
        self._properties = properties
        self._state = SessionState()
        self._listeners: list[StateListener] = []
        self._unsubscribe_auth: Unsubscribe | None = None
        self._closed = False
        # Pending store calls whose provider echo is applied by the call itself
        self._pending_sign_ins = 0
        self._pending_sign_outs = 0
        self._persist_lock = asyncio.Lock()
        self._background: set[asyncio.Task] = set()

    @property
    def state(self) -> SessionState:
        """Current state snapshot."""
        return self._state

    @property
    def identity(self) -> Identity | None:
        return self._state.identity

    @property
    def is_authenticated(self) -> bool:
        return self._state.is_authenticated

    def subscribe(self, listener: StateListener) -> Unsubscribe:
        """Call ``listener`` with the new state after every transition.

        Returns:
            A function that removes the listener (safe to call twice)
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Lifecycle

    async def initialize(self) -> SessionState:
        """Restore the persisted session and start observing the provider.

        Runs once per store. Restore failures are logged and treated as
        no prior session.

        Raises:
            RuntimeError: If the store was already initialized
        """
        if self._state.phase != SessionPhase.UNINITIALIZED:
            raise RuntimeError("Session store already initialized")

        self._set_state(
            self._state.identity,
            self._state.property,
            phase=SessionPhase.INITIALIZING,
        )

        identity, prop = await self._restore()
        self._unsubscribe_auth = self._auth.subscribe(self._on_provider_change)

        # An operation that finished while restoring wins over the restore
        if self._state.identity is not None:
            identity, prop = self._state.identity, self._state.property

        phase = (
            SessionPhase.AUTHENTICATED if identity is not None
            else SessionPhase.UNAUTHENTICATED
        )
        self._set_state(identity, prop, phase=phase)
        logger.info(f"Session initialized: {phase.value}")
        return self._state

    async def close(self) -> None:
        """Stop observing the provider and flush pending writes."""
        if self._closed:
            return
        self._closed = True
        if self._unsubscribe_auth is not None:
            self._unsubscribe_auth()
            self._unsubscribe_auth = None
        if self._background:
            await asyncio.gather(*self._background)

    async def __aenter__(self) -> "SessionStore":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # Operations

    async def sign_in(self, credential: Credential) -> Identity:
        """Sign in and make the identity current.

        Raises:
            AuthError: Classified failure; the state is left unchanged
        """
        self._pending_sign_ins += 1
        try:
            identity = await self._auth.authenticate(credential)
        except Exception as e:
            error = _classify(e)
            logger.warning(f"Sign-in failed: {error.kind.value}")
            if error is e:
                raise
            raise error from e
        finally:
            self._pending_sign_ins -= 1

        if identity.last_login_at is None:
            identity = identity.merged(last_login_at=datetime.now(UTC))

        current = self._state.property
        prop = current if current is not None and current.owner_id == identity.id else None
        self._set_state(identity, prop)
        logger.info(f"Signed in as {identity.id}")
        await self._persist()
        return identity

    async def sign_up(self, registration: Registration) -> tuple[Identity, Property | None]:
        """Create an identity and, if requested, its property.

        If the identity is created but the property is not, the identity is
        kept and signed in, and ResourceCreationFailedError is raised so the
        caller can retry with :meth:`create_property`.

        Raises:
            AuthError: Identity creation failed; the state is left unchanged
            ResourceCreationFailedError: Property creation failed
        """
        self._pending_sign_ins += 1
        try:
            identity = await self._auth.create_identity(registration)
        except Exception as e:
            error = _classify(e)
            logger.warning(f"Sign-up failed: {error.kind.value}")
            if error is e:
                raise
            raise error from e
        finally:
            self._pending_sign_ins -= 1

        prop: Property | None = None
        failure: ResourceCreationFailedError | None = None
        if registration.property is not None:
            try:
                prop = await self._create_property_for(identity, registration.property)
            except ResourceCreationFailedError as e:
                failure = e

        self._set_state(identity, prop)
        logger.info(
            f"Registered {identity.id}"
            + (f" with property {prop.id}" if prop else "")
        )
        await self._persist()

        if failure is not None:
            raise failure
        return identity, prop

    async def create_property(self, data: PropertyCreate) -> Property:
        """Create the property for the current identity.

        This is the retry path after a partially failed sign-up.

        Raises:
            NoActiveSessionError: If nobody is signed in
            ResourceCreationFailedError: If the property could not be created
        """
        identity = self._state.identity
        if identity is None:
            raise NoActiveSessionError("No identity to own the property")

        prop = await self._create_property_for(identity, data)

        # Someone else may have signed in meanwhile
        if self._state.identity is None or self._state.identity.id != identity.id:
            logger.warning(f"Session changed while creating property {prop.id}; not attached")
            return prop

        self._set_state(self._state.identity, prop)
        await self._persist()
        return prop

    async def logout(self) -> None:
        """Clear the session locally and at the provider.

        Does nothing when already logged out. A provider failure is logged;
        the local session is cleared regardless.
        """
        identity = self._state.identity
        if identity is None:
            return

        self._set_state(None, None)
        self._pending_sign_outs += 1
        try:
            await self._auth.revoke_session()
        except Exception as e:
            logger.warning(f"Provider sign-out failed for {identity.id}: {e}")
        finally:
            self._pending_sign_outs -= 1

        logger.info(f"Logged out {identity.id}")
        await self._persist()

    async def update_identity(self, **fields) -> Identity:
        """Overwrite the given identity fields and persist the result.

        Raises:
            NoActiveSessionError: If nobody is signed in
            ValueError: If a field is unknown or would change the id
        """
        current = self._state.identity
        if current is None:
            raise NoActiveSessionError("No identity to update")

        updated = current.merged(**fields)
        self._set_state(updated, self._state.property)
        logger.debug(f"Updated identity {updated.id}: {sorted(fields)}")
        await self._persist()
        return updated

    # Internals

    async def _create_property_for(self, identity: Identity, data: PropertyCreate) -> Property:
        if self._properties is None:
            raise ResourceCreationFailedError(identity, "No property service configured")
        try:
            prop = await self._properties.create_property(identity.id, data)
        except Exception as e:
            logger.warning(f"Property creation failed for {identity.id}: {e}")
            raise ResourceCreationFailedError(identity, str(e)) from e
        if prop.owner_id != identity.id:
            raise ResourceCreationFailedError(
                identity, f"Property {prop.id} returned with owner {prop.owner_id}"
            )
        return prop

    def _set_state(
        self,
        identity: Identity | None,
        prop: Property | None,
        phase: SessionPhase | None = None,
    ) -> None:
        if phase is None:
            if self._state.initializing:
                phase = self._state.phase
            elif identity is not None:
                phase = SessionPhase.AUTHENTICATED
            else:
                phase = SessionPhase.UNAUTHENTICATED

        new_state = SessionState(phase=phase, identity=identity, property=prop)
        if new_state == self._state:
            return
        self._state = new_state

        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception:
                logger.exception("Session listener failed")

    def _on_provider_change(self, identity: Identity | None) -> None:
        """Apply a session change reported by the provider."""
        if self._closed:
            return
        # Echo of one of our own calls; the operation applies its result.
        # A None during a pending sign-in is a real remote sign-out.
        if identity is None and self._pending_sign_outs:
            return
        if identity is not None and self._pending_sign_ins:
            return

        current = self._state
        if identity is None:
            if current.identity is None:
                return
            logger.info(f"Provider ended session for {current.identity.id}")
            self._set_state(None, None)
        else:
            if current.identity == identity:
                return
            prop = current.property
            if prop is not None and prop.owner_id != identity.id:
                prop = None
            logger.info(f"Provider switched session to {identity.id}")
            self._set_state(identity, prop)

        try:
            task = asyncio.get_running_loop().create_task(self._persist())
        except RuntimeError:
            logger.warning("No running event loop; provider change not persisted")
            return
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _restore(self) -> tuple[Identity | None, Property | None]:
        try:
            raw_identity = await self._storage.get(IDENTITY_KEY)
            if raw_identity is None:
                logger.debug("No persisted session")
                return None, None
            identity = Identity.model_validate_json(raw_identity)

            prop = None
            raw_property = await self._storage.get(RESOURCE_KEY)
            if raw_property is not None:
                prop = Property.model_validate_json(raw_property)
                if prop.owner_id != identity.id:
                    logger.warning(
                        f"Discarding persisted property {prop.id}: not owned by {identity.id}"
                    )
                    prop = None
        except (StorageError, ValidationError) as e:
            logger.warning(f"Could not restore session, starting fresh: {e}")
            return None, None

        logger.info(f"Restored session for {identity.id}")
        return identity, prop

    async def _persist(self) -> None:
        """Write the current state to storage.

        Failures are logged; the in-memory state stays authoritative.
        """
        async with self._persist_lock:
            state = self._state
            try:
                if state.identity is None:
                    await self._storage.remove(IDENTITY_KEY)
                else:
                    await self._storage.set(
                        IDENTITY_KEY, state.identity.model_dump_json().encode("utf-8")
                    )
                if state.property is None:
                    await self._storage.remove(RESOURCE_KEY)
                else:
                    await self._storage.set(
                        RESOURCE_KEY, state.property.model_dump_json().encode("utf-8")
                    )
            except StorageError as e:
                logger.error(f"Failed to persist session: {e}")
