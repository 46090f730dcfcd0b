"""Pydantic models for WaterWise."""

from waterwise.models.alert import Alert, AlertSeverity, AlertType
from waterwise.models.credentials import Credential, Registration
from waterwise.models.dashboard import (
    DashboardData,
    NotificationSettings,
    Preferences,
    SensorData,
    SensorReading,
    UserProfile,
)
from waterwise.models.identity import AccountStatus, Identity
from waterwise.models.property import (
    Coordinates,
    Property,
    PropertyCreate,
    PropertyUpdate,
    RiskLevel,
)
from waterwise.models.session import SessionPhase, SessionState

__all__ = [
    "AccountStatus",
    "Alert",
    "AlertSeverity",
    "AlertType",
    "Coordinates",
    "Credential",
    "DashboardData",
    "Identity",
    "NotificationSettings",
    "Preferences",
    "Property",
    "PropertyCreate",
    "PropertyUpdate",
    "Registration",
    "RiskLevel",
    "SensorData",
    "SensorReading",
    "SessionPhase",
    "SessionState",
    "UserProfile",
]
