"""Tests for alert feed helpers."""

from datetime import UTC, datetime, timedelta

import pytest

from waterwise.alerts import filter_alerts, mark_read, unread_count
from waterwise.models.alert import Alert, AlertSeverity, AlertType

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


def _alert(
    alert_id: str,
    severity: AlertSeverity,
    minutes_ago: int,
    is_read: bool = False,
) -> Alert:
    return Alert(
        id=alert_id,
        property_id="prop-1",
        property_name="Fazenda São Pedro",
        message=f"Alert {alert_id}",
        severity=severity,
        timestamp=NOW - timedelta(minutes=minutes_ago),
        is_read=is_read,
        type=AlertType.SOIL_MOISTURE,
    )


@pytest.fixture
def alerts() -> list[Alert]:
    return [
        _alert("1", AlertSeverity.HIGH, minutes_ago=5),
        _alert("2", AlertSeverity.MEDIUM, minutes_ago=15),
        _alert("3", AlertSeverity.LOW, minutes_ago=60, is_read=True),
        _alert("4", AlertSeverity.HIGH, minutes_ago=120),
    ]


class TestFilterAlerts:
    """Tests for filter_alerts."""

    def test_no_filter_sorts_newest_first(self, alerts):
        result = filter_alerts(list(reversed(alerts)))
        assert [a.id for a in result] == ["1", "2", "3", "4"]

    def test_unread_only(self, alerts):
        result = filter_alerts(alerts, unread_only=True)
        assert [a.id for a in result] == ["1", "2", "4"]

    def test_by_severity(self, alerts):
        result = filter_alerts(alerts, severity=AlertSeverity.HIGH)
        assert [a.id for a in result] == ["1", "4"]

    def test_combined(self, alerts):
        result = filter_alerts(alerts, unread_only=True, severity=AlertSeverity.LOW)
        assert result == []

    def test_does_not_mutate_input(self, alerts):
        original = list(alerts)
        filter_alerts(alerts, unread_only=True)
        assert alerts == original


class TestReadState:
    """Tests for unread_count and mark_read."""

    def test_unread_count(self, alerts):
        assert unread_count(alerts) == 3

    def test_mark_read(self, alerts):
        updated = mark_read(alerts, "2")

        assert unread_count(updated) == 2
        assert alerts[1].is_read is False
        assert updated[1].is_read is True

    def test_mark_read_unknown_id(self, alerts):
        assert mark_read(alerts, "missing") == alerts


class TestTimestamps:
    """Tests for mixed naive and aware alert timestamps."""

    def test_naive_timestamp_is_utc(self):
        alert = Alert.model_validate(
            {
                "id": "9",
                "propertyId": "prop-1",
                "propertyName": "Fazenda São Pedro",
                "message": "Chuva forte",
                "severity": "LOW",
                "timestamp": "2025-06-01T11:00:00",
            }
        )
        assert alert.timestamp == datetime(2025, 6, 1, 11, 0, tzinfo=UTC)

    def test_sorts_mixed_timestamps(self, alerts):
        naive = Alert.model_validate(
            {
                "id": "9",
                "propertyId": "prop-1",
                "propertyName": "Fazenda São Pedro",
                "message": "Chuva forte",
                "severity": "LOW",
                "timestamp": "2025-06-01T11:58:00",
            }
        )

        result = filter_alerts([*alerts, naive])

        assert [a.id for a in result] == ["9", "1", "2", "3", "4"]
