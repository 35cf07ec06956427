"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

Models (Config, TrackerConfig, ...) are defined in safety_alerts/core/config.py
to avoid information leakage between layers.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml

from safety_alerts.core.config import (
    DEFAULT_EMERGENCY_CONTACTS,
    DEFAULT_POSITION,
    ClassifierConfig,
    Config,
    EmergencyContact,
    TrackerConfig,
    TrackingMode,
    TriageConfig,
)
from safety_alerts.core.geo import Position
from safety_alerts.shell.secret_manager_client import SecretManagerClient, SecretManagerConfig


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "config/config.yaml"


def _get_secret_manager_client() -> Optional[SecretManagerClient]:
    """Get a Secret Manager client.

    Returns None if GCP_PROJECT is not set (e.g., local development).
    """
    project_id = os.environ.get("GCP_PROJECT")
    if project_id:
        return SecretManagerClient(SecretManagerConfig(project_id=project_id))
    return None


def _resolve_value(value: Any, secret_client: Optional[SecretManagerClient] = None) -> Any:
    """Expand a ``${ENV_VAR}`` or ``${secret:name}`` placeholder.

    Non-strings pass through. Secret references need a client; without one
    they are left as-is so validation reports them.
    """
    if not isinstance(value, str):
        return value

    if secret_client:
        return secret_client.resolve(value)

    if not (value.startswith("${") and value.endswith("}")):
        return value

    reference = value[2:-1]
    if reference.startswith("secret:"):
        logger.warning("Cannot resolve %s without GCP_PROJECT", value)
        return value

    return os.environ.get(reference) or value


def _parse_position(data: dict[str, Any] | None) -> Position:
    """Parse a position from config data, defaulting to the reference point."""
    if not data:
        return DEFAULT_POSITION
    return Position(
        latitude=float(data["latitude"]),
        longitude=float(data["longitude"]),
    )


def _parse_tracker(data: dict[str, Any]) -> TrackerConfig:
    """Parse location tracking settings from config data."""
    defaults = TrackerConfig()
    return TrackerConfig(
        mode=TrackingMode(data.get("mode", defaults.mode.value)),
        default_position=_parse_position(data.get("default_position")),
        tick_seconds=float(data.get("tick_seconds", defaults.tick_seconds)),
        step_degrees=float(data.get("step_degrees", defaults.step_degrees)),
    )


def _parse_classifier(
    data: dict[str, Any],
    secret_client: Optional[SecretManagerClient] = None,
) -> ClassifierConfig:
    """Parse classification service settings from config data."""
    defaults = ClassifierConfig()
    return ClassifierConfig(
        api_key=_resolve_value(data.get("api_key"), secret_client) or None,
        model=data.get("model", defaults.model),
        endpoint=data.get("endpoint", defaults.endpoint),
        timeout_seconds=int(data.get("timeout_seconds", defaults.timeout_seconds)),
    )


def _parse_triage(data: dict[str, Any]) -> TriageConfig:
    """Parse proximity settings from config data."""
    defaults = TriageConfig()
    return TriageConfig(
        nearby_radius_km=float(data.get("nearby_radius_km", defaults.nearby_radius_km)),
        interrupt_radius_km=float(
            data.get("interrupt_radius_km", defaults.interrupt_radius_km)
        ),
    )


def _parse_contact(data: dict[str, Any]) -> EmergencyContact:
    """Parse an emergency contact from config data."""
    return EmergencyContact(name=data["name"], number=str(data["number"]))


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only placeholder expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    secret_client = _get_secret_manager_client()

    contacts = [_parse_contact(c) for c in data.get("emergency_contacts", [])]

    return Config(
        tracker=_parse_tracker(data.get("tracker", {})),
        classifier=_parse_classifier(data.get("classifier", {}), secret_client),
        triage=_parse_triage(data.get("triage", {})),
        emergency_contacts=contacts or list(DEFAULT_EMERGENCY_CONTACTS),
        load_mock_feed=bool(data.get("load_mock_feed", True)),
    )


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O. A missing or empty file yields the
    defaults, so the app still runs (offline classifier, demo feed).

    Args:
        config_path: YAML file; defaults to $CONFIG_PATH, then
            config/config.yaml

    Raises:
        yaml.YAMLError: If the file is not valid YAML
    """
    path = Path(config_path or os.environ.get("CONFIG_PATH", DEFAULT_CONFIG_PATH))

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return Config()

    logger.info("Loading configuration from %s", path)
    data = yaml.safe_load(path.read_text())

    if not data:
        logger.warning("Config file %s is empty, using defaults", path)
        return Config()

    config = load_config_from_dict(data)
    logger.info(
        "Loaded config: tracker=%s, classifier=%s, %d contacts",
        config.tracker.mode.value,
        "configured" if config.classifier.configured else "offline",
        len(config.emergency_contacts),
    )
    return config


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Useful for simple deployments without a YAML file.

    Environment variables:
        CLASSIFIER_API_KEY: Classification service key (or use Secret Manager)
        CLASSIFIER_API_KEY_SECRET: Secret name in Secret Manager
        CLASSIFIER_MODEL: Model name
        TRACKER_MODE: 'live' or 'simulation'
        DEFAULT_LATITUDE / DEFAULT_LONGITUDE: Fallback position
        NEARBY_RADIUS_KM: Radius of the nearby feed

    Returns:
        Config object from environment
    """
    secret_client = _get_secret_manager_client()
    api_key = None

    secret_name = os.environ.get("CLASSIFIER_API_KEY_SECRET")
    if secret_client and secret_name:
        api_key = secret_client.get_secret(secret_name)
        if api_key:
            logger.info("Using classifier API key from Secret Manager")

    if not api_key:
        api_key = os.environ.get("CLASSIFIER_API_KEY")

    if not api_key:
        logger.warning("CLASSIFIER_API_KEY not set, classification runs offline")

    default_position = DEFAULT_POSITION
    lat = os.environ.get("DEFAULT_LATITUDE")
    lon = os.environ.get("DEFAULT_LONGITUDE")
    if lat and lon:
        default_position = Position(latitude=float(lat), longitude=float(lon))

    triage = TriageConfig()
    radius = os.environ.get("NEARBY_RADIUS_KM")
    if radius:
        triage = TriageConfig(nearby_radius_km=float(radius))

    return Config(
        tracker=TrackerConfig(
            mode=TrackingMode(os.environ.get("TRACKER_MODE", "live")),
            default_position=default_position,
        ),
        classifier=ClassifierConfig(
            api_key=api_key or None,
            model=os.environ.get("CLASSIFIER_MODEL", ClassifierConfig().model),
        ),
        triage=triage,
    )
