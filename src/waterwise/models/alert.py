"""Alert models."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class AlertSeverity(str, Enum):
    """How urgent an alert is."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class AlertType(str, Enum):
    """What raised the alert."""

    SOIL_MOISTURE = "SOIL_MOISTURE"
    WEATHER = "WEATHER"
    FLOOD_RISK = "FLOOD_RISK"
    SYSTEM = "SYSTEM"


class Alert(BaseModel):
    """A risk alert for one property."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    property_id: str
    property_name: str
    message: str
    severity: AlertSeverity
    timestamp: datetime
    is_read: bool = False
    type: AlertType = AlertType.SYSTEM

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # The API sends both naive and offset timestamps; naive ones are UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value
