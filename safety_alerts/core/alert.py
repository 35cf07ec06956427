"""Alert data models and parsing - Pure functions.

This module defines the emergency alert model and parses raw feed records
into typed Alert objects. All functions are pure with no side effects.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from safety_alerts.core.geo import Position


class Category(str, Enum):
    """Closed set of emergency categories."""
    MEDICAL = "MEDICAL"
    POLICE = "POLICE"
    FIRE = "FIRE"
    CAR = "CAR"
    GENERAL = "GENERAL"
    CCTV = "CCTV"


class Severity(str, Enum):
    """Ordered severity levels, lowest first."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class Status(str, Enum):
    """Alert lifecycle status. Transitions arrive from outside the core."""
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    RESOLVED = "RESOLVED"


@dataclass(frozen=True)
class Alert:
    """Immutable emergency alert.

    Only ``status`` may change over an alert's lifetime, and only by
    replacing the whole instance (see ``with_status``).

    Attributes:
        id: Unique, stable alert identifier (never reused)
        category: Emergency category
        severity: Severity level
        description: Free text, may be empty
        position: Where the incident occurs
        created_at: Creation time, milliseconds since epoch
        reporter_label: Display name of the reporter
        status: Lifecycle status
    """
    id: str
    category: Category
    severity: Severity
    description: str
    position: Position
    created_at: int
    reporter_label: str
    status: Status = Status.PENDING

    def with_status(self, status: Status) -> "Alert":
        """Return a copy of this alert with a new status."""
        return replace(self, status=status)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category.value,
            "severity": self.severity.value,
            "description": self.description,
            "position": self.position.to_dict(),
            "created_at": self.created_at,
            "reporter_label": self.reporter_label,
            "status": self.status.value,
        }


def parse_alert(record: dict[str, Any]) -> Alert | None:
    """Parse a single feed record into an Alert.

    Pure function: takes raw dict, returns typed Alert or None if invalid.

    Accepts both ``position: {latitude, longitude}`` and the producer's
    short form ``location: {lat, lng}``.

    Args:
        record: Alert record from the feed producer

    Returns:
        Alert object or None if parsing fails
    """
    try:
        alert_id = record.get("id")
        if not alert_id:
            return None

        coords = record.get("position") or record.get("location") or {}
        latitude = coords.get("latitude", coords.get("lat"))
        longitude = coords.get("longitude", coords.get("lng"))
        if latitude is None or longitude is None:
            return None

        created_at = record.get("created_at", record.get("timestamp"))
        if created_at is None:
            return None

        return Alert(
            id=str(alert_id),
            category=Category(record.get("category", record.get("type", "GENERAL"))),
            severity=Severity(record.get("severity", record.get("priority", "MEDIUM"))),
            description=record.get("description") or "",
            position=Position(latitude=float(latitude), longitude=float(longitude)),
            created_at=int(created_at),
            reporter_label=record.get("reporter_label", record.get("reporterName", "")),
            status=Status(record.get("status", "PENDING")),
        )
    except (AttributeError, KeyError, TypeError, ValueError):
        return None


def parse_alerts(records: list[dict[str, Any]]) -> list[Alert]:
    """Parse a list of feed records, dropping invalid ones.

    Pure function. Preserves the producer's order.

    Args:
        records: Raw alert records

    Returns:
        List of valid Alert objects
    """
    alerts = []

    for record in records:
        alert = parse_alert(record)
        if alert is not None:
            alerts.append(alert)

    return alerts
