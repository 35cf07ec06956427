"""Tests for the Configuration Loader module.

Tests configuration loading from YAML files and environment variables.
"""

import os
import tempfile
from unittest.mock import Mock, patch

from safety_alerts.core.config import (
    DEFAULT_EMERGENCY_CONTACTS,
    DEFAULT_POSITION,
    Config,
    EmergencyContact,
    TrackingMode,
)
from safety_alerts.core.geo import Position
from safety_alerts.shell.config_loader import (
    _get_secret_manager_client,
    _parse_classifier,
    _parse_contact,
    _parse_position,
    _parse_tracker,
    _parse_triage,
    _resolve_value,
    load_config,
    load_config_from_dict,
    load_config_from_env,
)


NO_SECRETS = "safety_alerts.shell.config_loader._get_secret_manager_client"


class TestResolveValue:
    """Tests for _resolve_value function."""

    def test_returns_non_string_unchanged(self):
        """Non-string values are returned unchanged."""
        assert _resolve_value(123) == 123
        assert _resolve_value(None) is None

    def test_returns_plain_string_unchanged(self):
        """Plain strings without placeholders are returned unchanged."""
        assert _resolve_value("gemini-2.5-flash") == "gemini-2.5-flash"

    def test_resolves_env_var_placeholder(self):
        """Resolves ${VAR} placeholders from environment."""
        with patch.dict(os.environ, {"TEST_VAR": "test_value"}):
            assert _resolve_value("${TEST_VAR}") == "test_value"

    def test_returns_placeholder_if_env_var_not_set(self):
        """Returns original placeholder if env var not set."""
        with patch.dict(os.environ, {}, clear=True):
            assert _resolve_value("${UNDEFINED_VAR}") == "${UNDEFINED_VAR}"

    def test_uses_secret_client_when_provided(self):
        """Uses secret client for resolution when provided."""
        mock_client = Mock()
        mock_client.resolve.return_value = "secret_value"

        result = _resolve_value("${secret:classifier-key}", mock_client)

        assert result == "secret_value"
        mock_client.resolve.assert_called_once_with("${secret:classifier-key}")

    def test_ignores_secret_placeholder_without_client(self):
        """Secret placeholders stay unresolved without a client."""
        assert _resolve_value("${secret:classifier-key}") == "${secret:classifier-key}"


class TestParseSections:
    """Tests for the per-section parsers."""

    def test_parse_position(self):
        """Parses latitude/longitude, converting strings to float."""
        assert _parse_position({"latitude": "18.79", "longitude": 98.98}) == Position(18.79, 98.98)

    def test_parse_position_defaults(self):
        """Missing position falls back to the default."""
        assert _parse_position(None) == DEFAULT_POSITION

    def test_parse_tracker(self):
        """Parses mode and simulation settings."""
        tracker = _parse_tracker({"mode": "simulation", "tick_seconds": 0.5})

        assert tracker.mode is TrackingMode.SIMULATION
        assert tracker.tick_seconds == 0.5
        assert tracker.step_degrees == 0.00008
        assert tracker.default_position == DEFAULT_POSITION

    def test_parse_classifier_resolves_key(self):
        """API key placeholder is expanded from the environment."""
        with patch.dict(os.environ, {"CLASSIFIER_API_KEY": "abc"}):
            classifier = _parse_classifier({"api_key": "${CLASSIFIER_API_KEY}"})

        assert classifier.api_key == "abc"
        assert classifier.configured is True

    def test_parse_classifier_empty_key_is_none(self):
        """Empty API key is normalised to None."""
        assert _parse_classifier({"api_key": ""}).api_key is None

    def test_parse_triage(self):
        """Parses both radii."""
        triage = _parse_triage({"nearby_radius_km": 3, "interrupt_radius_km": 2})

        assert triage.nearby_radius_km == 3.0
        assert triage.interrupt_radius_km == 2.0

    def test_parse_contact_number_as_string(self):
        """Numeric YAML values become strings."""
        assert _parse_contact({"name": "Fire", "number": 199}) == EmergencyContact("Fire", "199")


class TestLoadConfigFromDict:
    """Tests for load_config_from_dict function."""

    def test_loads_minimal_config(self):
        """Empty dict gives defaults."""
        with patch(NO_SECRETS, return_value=None):
            result = load_config_from_dict({})

        assert result.tracker.mode is TrackingMode.LIVE
        assert result.classifier.api_key is None
        assert result.emergency_contacts == list(DEFAULT_EMERGENCY_CONTACTS)
        assert result.load_mock_feed is True

    def test_loads_full_config(self):
        """Every section is parsed."""
        data = {
            "tracker": {"mode": "simulation"},
            "classifier": {"api_key": "k", "model": "other-model", "timeout_seconds": 5},
            "triage": {"nearby_radius_km": 2.5},
            "emergency_contacts": [{"name": "Police", "number": "191"}],
            "load_mock_feed": False,
        }

        with patch(NO_SECRETS, return_value=None):
            result = load_config_from_dict(data)

        assert result.tracker.mode is TrackingMode.SIMULATION
        assert result.classifier.model == "other-model"
        assert result.classifier.timeout_seconds == 5
        assert result.triage.nearby_radius_km == 2.5
        assert result.triage.interrupt_radius_km == 5.0
        assert result.emergency_contacts == [EmergencyContact("Police", "191")]
        assert result.load_mock_feed is False

    def test_resolves_secret_key(self):
        """API key is resolved through Secret Manager when available."""
        mock_client = Mock()
        mock_client.resolve.return_value = "from-secret-manager"

        with patch(NO_SECRETS, return_value=mock_client):
            result = load_config_from_dict({"classifier": {"api_key": "${secret:key}"}})

        assert result.classifier.api_key == "from-secret-manager"


class TestLoadConfig:
    """Tests for load_config function."""

    def test_loads_from_yaml_file(self):
        """Loads configuration from YAML file."""
        yaml_content = """
tracker:
  mode: simulation
  default_position:
    latitude: 18.7883
    longitude: 98.9853
triage:
  nearby_radius_km: 3
emergency_contacts:
  - name: Police
    number: "191"
load_mock_feed: false
"""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write(yaml_content)
            temp_path = f.name

        try:
            with patch(NO_SECRETS, return_value=None):
                result = load_config(temp_path)

            assert result.tracker.mode is TrackingMode.SIMULATION
            assert result.tracker.default_position == Position(18.7883, 98.9853)
            assert result.triage.nearby_radius_km == 3.0
            assert len(result.emergency_contacts) == 1
            assert result.load_mock_feed is False
        finally:
            os.unlink(temp_path)

    def test_returns_default_config_when_file_not_found(self):
        """Returns default config when file doesn't exist."""
        with patch(NO_SECRETS, return_value=None):
            result = load_config("/nonexistent/path/config.yaml")

        assert result == Config()

    def test_returns_default_config_for_empty_file(self):
        """Returns default config when file is empty."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write("")
            temp_path = f.name

        try:
            with patch(NO_SECRETS, return_value=None):
                result = load_config(temp_path)

            assert result == Config()
        finally:
            os.unlink(temp_path)

    def test_uses_config_path_env_var(self):
        """Uses CONFIG_PATH environment variable when path not specified."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write("tracker:\n  tick_seconds: 2\n")
            temp_path = f.name

        try:
            with patch.dict(os.environ, {"CONFIG_PATH": temp_path}):
                with patch(NO_SECRETS, return_value=None):
                    result = load_config()

            assert result.tracker.tick_seconds == 2.0
        finally:
            os.unlink(temp_path)


class TestLoadConfigFromEnv:
    """Tests for load_config_from_env function."""

    def test_defaults_without_env(self):
        """No env vars gives an offline classifier and the default position."""
        with patch.dict(os.environ, {}, clear=True):
            with patch(NO_SECRETS, return_value=None):
                result = load_config_from_env()

        assert result.classifier.api_key is None
        assert result.tracker.default_position == DEFAULT_POSITION
        assert result.tracker.mode is TrackingMode.LIVE

    def test_loads_config_from_env_vars(self):
        """Reads key, mode, position and radius."""
        env_vars = {
            "CLASSIFIER_API_KEY": "abc",
            "CLASSIFIER_MODEL": "m2",
            "TRACKER_MODE": "simulation",
            "DEFAULT_LATITUDE": "7.88",
            "DEFAULT_LONGITUDE": "98.39",
            "NEARBY_RADIUS_KM": "2",
        }
        with patch.dict(os.environ, env_vars, clear=True):
            with patch(NO_SECRETS, return_value=None):
                result = load_config_from_env()

        assert result.classifier.api_key == "abc"
        assert result.classifier.model == "m2"
        assert result.tracker.mode is TrackingMode.SIMULATION
        assert result.tracker.default_position == Position(7.88, 98.39)
        assert result.triage.nearby_radius_km == 2.0

    def test_uses_secret_manager_when_available(self):
        """Reads the key from Secret Manager when a secret name is given."""
        mock_client = Mock()
        mock_client.get_secret.return_value = "secret-key"

        env_vars = {"GCP_PROJECT": "test-project", "CLASSIFIER_API_KEY_SECRET": "classifier-key"}
        with patch.dict(os.environ, env_vars, clear=True):
            with patch(NO_SECRETS, return_value=mock_client):
                result = load_config_from_env()

        assert result.classifier.api_key == "secret-key"
        mock_client.get_secret.assert_called_once_with("classifier-key")

    def test_falls_back_to_env_var_when_secret_not_found(self):
        """Falls back to CLASSIFIER_API_KEY if the secret is missing."""
        mock_client = Mock()
        mock_client.get_secret.return_value = None

        env_vars = {
            "GCP_PROJECT": "test-project",
            "CLASSIFIER_API_KEY_SECRET": "classifier-key",
            "CLASSIFIER_API_KEY": "env-key",
        }
        with patch.dict(os.environ, env_vars, clear=True):
            with patch(NO_SECRETS, return_value=mock_client):
                result = load_config_from_env()

        assert result.classifier.api_key == "env-key"


class TestGetSecretManagerClient:
    """Tests for _get_secret_manager_client function."""

    def test_returns_none_without_project(self):
        """Returns None when GCP_PROJECT is not set."""
        with patch.dict(os.environ, {}, clear=True):
            assert _get_secret_manager_client() is None

    def test_creates_client_with_project(self):
        """Creates client with the project from GCP_PROJECT."""
        with patch.dict(os.environ, {"GCP_PROJECT": "test-project"}):
            with patch("safety_alerts.shell.config_loader.SecretManagerClient") as MockClient:
                _get_secret_manager_client()

        config = MockClient.call_args[0][0]
        assert config.project_id == "test-project"
