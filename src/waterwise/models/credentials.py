"""Sign-in and registration inputs."""

from pydantic import BaseModel, Field, SecretStr

from waterwise.models.property import PropertyCreate


class Credential(BaseModel):
    """Email and password for signing in."""

    email: str
    password: SecretStr


class Registration(BaseModel):
    """Fields for creating a new identity, optionally with its property."""

    name: str = Field(min_length=1)
    email: str
    password: SecretStr
    phone: str | None = None
    property: PropertyCreate | None = None

    def to_credential(self) -> Credential:
        """The credential this registration will sign in with."""
        return Credential(email=self.email, password=self.password)
