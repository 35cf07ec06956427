"""Unit tests for alert parsing.

Pure function tests - no mocks needed.
"""

import pytest

from safety_alerts.core.alert import (
    Alert,
    Category,
    Severity,
    Status,
    parse_alert,
    parse_alerts,
)
from safety_alerts.core.geo import Position


@pytest.fixture
def producer_record():
    """A record in the feed producer's short format."""
    return {
        "id": "3",
        "type": "FIRE",
        "priority": "CRITICAL",
        "description": "Black smoke behind the market",
        "location": {"lat": 13.75, "lng": 100.505},
        "timestamp": 1700000000000,
        "reporterName": "Uncle Pol",
        "status": "PENDING",
    }


class TestParseAlert:
    """Tests for parse_alert() function."""

    def test_parses_producer_format(self, producer_record):
        """Short-form producer records parse into a typed Alert."""
        alert = parse_alert(producer_record)

        assert alert == Alert(
            id="3",
            category=Category.FIRE,
            severity=Severity.CRITICAL,
            description="Black smoke behind the market",
            position=Position(13.75, 100.505),
            created_at=1700000000000,
            reporter_label="Uncle Pol",
            status=Status.PENDING,
        )

    def test_parses_long_format(self):
        """Records using the model's own field names also parse."""
        alert = parse_alert({
            "id": "a1",
            "category": "CCTV",
            "severity": "LOW",
            "description": "",
            "position": {"latitude": 1.0, "longitude": 2.0},
            "created_at": 5,
            "reporter_label": "Camera 7",
            "status": "RESOLVED",
        })

        assert alert is not None
        assert alert.category is Category.CCTV
        assert alert.position == Position(1.0, 2.0)
        assert alert.status is Status.RESOLVED

    def test_missing_id_returns_none(self, producer_record):
        del producer_record["id"]
        assert parse_alert(producer_record) is None

    def test_missing_location_returns_none(self, producer_record):
        del producer_record["location"]
        assert parse_alert(producer_record) is None

    def test_missing_timestamp_returns_none(self, producer_record):
        del producer_record["timestamp"]
        assert parse_alert(producer_record) is None

    def test_unknown_category_returns_none(self, producer_record):
        producer_record["type"] = "EARTHQUAKE"
        assert parse_alert(producer_record) is None

    def test_unknown_severity_returns_none(self, producer_record):
        producer_record["priority"] = "URGENT"
        assert parse_alert(producer_record) is None

    def test_defaults_status_to_pending(self, producer_record):
        del producer_record["status"]
        assert parse_alert(producer_record).status is Status.PENDING

    def test_empty_description_allowed(self, producer_record):
        producer_record["description"] = None
        assert parse_alert(producer_record).description == ""


class TestParseAlerts:
    """Tests for parse_alerts() function."""

    def test_drops_invalid_and_keeps_order(self, producer_record):
        records = [
            {**producer_record, "id": "b"},
            {"id": "broken"},
            {**producer_record, "id": "a"},
        ]

        alerts = parse_alerts(records)

        assert [a.id for a in alerts] == ["b", "a"]

    def test_empty_list(self):
        assert parse_alerts([]) == []


class TestAlertModel:
    """Tests for Alert immutability and severity ordering."""

    def test_with_status_only_changes_status(self, producer_record):
        alert = parse_alert(producer_record)
        accepted = alert.with_status(Status.ACCEPTED)

        assert accepted.status is Status.ACCEPTED
        assert alert.status is Status.PENDING
        assert accepted.position == alert.position
        assert accepted.created_at == alert.created_at
        assert accepted.reporter_label == alert.reporter_label

    def test_alert_is_frozen(self, producer_record):
        alert = parse_alert(producer_record)
        with pytest.raises(AttributeError):
            alert.category = Category.POLICE

    def test_to_dict_uses_enum_values(self, producer_record):
        data = parse_alert(producer_record).to_dict()
        assert data["category"] == "FIRE"
        assert data["severity"] == "CRITICAL"
        assert data["position"] == {"latitude": 13.75, "longitude": 100.505}
