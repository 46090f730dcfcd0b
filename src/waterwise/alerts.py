"""Alert feed helpers: filtering, counting and marking alerts read."""

from waterwise.models.alert import Alert, AlertSeverity


def filter_alerts(
    alerts: list[Alert],
    unread_only: bool = False,
    severity: AlertSeverity | None = None,
) -> list[Alert]:
    """Filter alerts by read state and severity, newest first.

    Args:
        alerts: Alerts to filter
        unread_only: Keep only alerts not yet read
        severity: Keep only alerts of this severity (None keeps all)

    Returns:
        A new list sorted by timestamp, most recent first
    """
    filtered = [
        a for a in alerts
        if (not unread_only or not a.is_read)
        and (severity is None or a.severity == severity)
    ]
    return sorted(filtered, key=lambda a: a.timestamp, reverse=True)


def unread_count(alerts: list[Alert]) -> int:
    return sum(1 for a in alerts if not a.is_read)


def mark_read(alerts: list[Alert], alert_id: str) -> list[Alert]:
    """Return a copy of ``alerts`` with one alert marked read."""
    return [
        a.model_copy(update={"is_read": True}) if a.id == alert_id else a
        for a in alerts
    ]
