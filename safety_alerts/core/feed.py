"""Demo alert feed - Pure functions.

Seed records standing in for the external alert producer, plus the
simulated incoming alert used to exercise the interrupting overlay.
"""

import random
from typing import Any

from safety_alerts.core.alert import Alert, Category, Severity, Status, parse_alerts
from safety_alerts.core.geo import Position


# Simulated alerts land within this many degrees of the user on each axis
# (about 500 m), so they interrupt by default
SIMULATED_ALERT_SPREAD_DEGREES = 0.01

SIMULATED_REPORTER_LABEL = "Test system"


def mock_feed_records(now_ms: int) -> list[dict[str, Any]]:
    """Demo records in producer format, timestamped relative to ``now_ms``.

    Pure function.
    """
    minute = 60 * 1000
    return [
        {
            "id": "1",
            "type": "CAR",
            "priority": "MEDIUM",
            "description": "Flat tyre, can't change it myself",
            "location": {"lat": 13.7563, "lng": 100.5018},
            "timestamp": now_ms - 15 * minute,
            "reporterName": "Somchai J.",
            "status": "PENDING",
        },
        {
            "id": "2",
            "type": "MEDICAL",
            "priority": "HIGH",
            "description": "Person fainted, feeling dizzy",
            "location": {"lat": 13.7600, "lng": 100.5100},
            "timestamp": now_ms - 5 * minute,
            "reporterName": "Wipawee M.",
            "status": "ACCEPTED",
        },
        {
            "id": "3",
            "type": "FIRE",
            "priority": "CRITICAL",
            "description": "Black smoke behind the market",
            "location": {"lat": 13.7500, "lng": 100.5050},
            "timestamp": now_ms - 2 * minute,
            "reporterName": "Uncle Pol, market",
            "status": "PENDING",
        },
        {
            "id": "4",
            "type": "POLICE",
            "priority": "HIGH",
            "description": "Drunk man throwing bottles",
            "location": {"lat": 13.7580, "lng": 100.4950},
            "timestamp": now_ms - 30 * minute,
            "reporterName": "Auntie Noi, soi 5",
            "status": "PENDING",
        },
    ]


def mock_feed(now_ms: int) -> list[Alert]:
    """Parsed demo alerts in producer order. Pure function."""
    return parse_alerts(mock_feed_records(now_ms))


def simulated_alert(
    position: Position,
    now_ms: int,
    rng: random.Random | None = None,
) -> Alert:
    """Build a FIRE/CRITICAL test alert close to the user.

    Deterministic for a seeded ``rng``.

    Args:
        position: Current user position
        now_ms: Creation timestamp; also used in the id
        rng: Random source for the offset

    Returns:
        A pending alert within half the spread of the user on each axis
    """
    rng = rng or random.Random()
    offset_lat = (rng.random() - 0.5) * SIMULATED_ALERT_SPREAD_DEGREES
    offset_lng = (rng.random() - 0.5) * SIMULATED_ALERT_SPREAD_DEGREES

    return Alert(
        id=f"sim-{now_ms}",
        category=Category.FIRE,
        severity=Severity.CRITICAL,
        description="Fire alert test (simulation)",
        position=position.offset(offset_lat, offset_lng),
        created_at=now_ms,
        reporter_label=SIMULATED_REPORTER_LABEL,
        status=Status.PENDING,
    )
