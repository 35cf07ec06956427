"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Alert data parsing
- Geo/distance calculations
- Proximity views and interruption triage
- Classification validation and fallbacks
- Report building and display formatting

The alert store is the one stateful piece; it performs no I/O.
"""

from safety_alerts.core.alert import Alert, Category, Severity, Status, parse_alerts
from safety_alerts.core.geo import Position, calculate_distance, distance_km
from safety_alerts.core.store import AlertStore, DuplicateAlertError
from safety_alerts.core.proximity import NEARBY_RADIUS_KM, ProximityFilter, nearby, with_distance
from safety_alerts.core.triage import TriageDecider, Idle, Presenting
from safety_alerts.core.classification import ClassificationResult, validate_payload

__all__ = [
    # Alert
    "Alert",
    "Category",
    "Severity",
    "Status",
    "parse_alerts",
    # Geo
    "Position",
    "calculate_distance",
    "distance_km",
    # Store
    "AlertStore",
    "DuplicateAlertError",
    # Proximity
    "NEARBY_RADIUS_KM",
    "ProximityFilter",
    "nearby",
    "with_distance",
    # Triage
    "TriageDecider",
    "Idle",
    "Presenting",
    # Classification
    "ClassificationResult",
    "validate_payload",
]
