"""Observable session state."""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator

from waterwise.models.identity import Identity
from waterwise.models.property import Property


class SessionPhase(str, Enum):
    """Lifecycle phase of a session store."""

    UNINITIALIZED = "uninitialized"  # Constructed, restore not started
    INITIALIZING = "initializing"  # Restoring persisted identity
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class SessionState(BaseModel):
    """Snapshot of the current authentication status.

    Instances are immutable; the store replaces the whole snapshot on
    every transition.
    """

    model_config = ConfigDict(frozen=True)

    phase: SessionPhase = SessionPhase.UNINITIALIZED
    identity: Identity | None = None
    # Annotated default keeps the ``property`` builtin usable below
    property: Annotated[Property | None, Field(default=None)]

    @model_validator(mode="after")
    def _check_ownership(self) -> "SessionState":
        if self.property is not None:
            if self.identity is None:
                raise ValueError("property requires an identity")
            if self.property.owner_id != self.identity.id:
                raise ValueError(
                    f"property {self.property.id} is not owned by identity {self.identity.id}"
                )
        return self

    @property
    def initializing(self) -> bool:
        """True until the startup restore has finished."""
        return self.phase in (SessionPhase.UNINITIALIZED, SessionPhase.INITIALIZING)

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None
