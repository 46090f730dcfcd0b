"""Rural property models.

The WaterWise API speaks camelCase JSON; models accept either spelling
and serialize with ``by_alias=True`` for the wire.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RiskLevel(str, Enum):
    """Flood risk level reported for a property."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Coordinates(_ApiModel):
    """Geographic position of a property."""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class PropertyCreate(_ApiModel):
    """Payload for registering a property."""

    name: str = Field(min_length=1)
    address: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    area: float | None = Field(default=None, gt=0)  # Hectares
    coordinates: Coordinates | None = None
    description: str | None = None


class PropertyUpdate(_ApiModel):
    """Partial update for a property; unset fields are left alone."""

    name: str | None = Field(default=None, min_length=1)
    address: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    area: float | None = Field(default=None, gt=0)
    coordinates: Coordinates | None = None
    description: str | None = None


class Property(_ApiModel):
    """A rural property owned by an identity."""

    id: str
    name: str
    owner_id: str
    address: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    area: float | None = None
    coordinates: Coordinates | None = None
    description: str | None = None

    # Monitoring data filled in by the API
    soil_moisture: float | None = None  # Percent
    risk_level: RiskLevel | None = None
    last_update: datetime | None = None
