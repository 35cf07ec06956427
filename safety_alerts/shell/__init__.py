"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- Positioning source and location tracker (watch handles, timers)
- Classification service client (HTTP)
- Secret Manager client (credentials)
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from safety_alerts.shell.location_tracker import LocationTracker, ManualPositionSource
from safety_alerts.shell.classification_client import ClassificationClient
from safety_alerts.shell.incident_classifier import IncidentClassifier
from safety_alerts.shell.config_loader import load_config, load_config_from_env

__all__ = [
    "LocationTracker",
    "ManualPositionSource",
    "ClassificationClient",
    "IncidentClassifier",
    "load_config",
    "load_config_from_env",
]
