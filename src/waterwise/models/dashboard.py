"""Dashboard and user profile models returned by the WaterWise API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from waterwise.models.alert import Alert
from waterwise.models.property import RiskLevel


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DashboardData(_ApiModel):
    """Summary numbers shown on the dashboard."""

    total_properties: int = 0
    active_alerts: int = 0
    avg_soil_moisture: float = 0.0
    weather_forecast: str = ""
    risk_level: RiskLevel = RiskLevel.LOW
    recent_alerts: list[Alert] = Field(default_factory=list)


class SensorReading(_ApiModel):
    """One sample of a sensor time series."""

    timestamp: datetime
    value: float


class SensorData(_ApiModel):
    """Sensor time series for a property."""

    soil_moisture: list[SensorReading] = Field(default_factory=list)
    temperature: list[SensorReading] = Field(default_factory=list)
    rainfall: list[SensorReading] = Field(default_factory=list)


class NotificationSettings(_ApiModel):
    """Which channels the user receives alerts on."""

    push: bool = True
    email: bool = True
    sms: bool = False


class Preferences(_ApiModel):
    """Display and alerting preferences."""

    language: str = "pt-BR"
    theme: str = "light"
    alert_frequency: str = "immediate"


class UserProfile(_ApiModel):
    """Profile record kept by the WaterWise API."""

    id: str
    name: str
    email: str
    phone: str | None = None
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    preferences: Preferences = Field(default_factory=Preferences)
