"""Identity model for the signed-in principal."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel


class AccountStatus(str, Enum):
    """Status of an account at the identity provider."""

    ACTIVE = "active"
    DISABLED = "disabled"
    PENDING = "pending"  # Registered, onboarding not finished


class Identity(BaseModel):
    """The authenticated user."""

    id: str
    name: str
    email: str
    phone: str | None = None
    status: AccountStatus = AccountStatus.ACTIVE
    last_login_at: datetime | None = None

    def merged(self, **fields: Any) -> "Identity":
        """Return a copy with the given fields overwritten.

        Unspecified fields keep their current value. The id is immutable.

        Raises:
            ValueError: If a field name is unknown or ``id`` is given
        """
        unknown = set(fields) - set(type(self).model_fields)
        if unknown:
            raise ValueError(f"Unknown identity fields: {sorted(unknown)}")
        if "id" in fields and fields["id"] != self.id:
            raise ValueError("Identity id cannot be changed")
        return Identity.model_validate({**self.model_dump(), **fields})
